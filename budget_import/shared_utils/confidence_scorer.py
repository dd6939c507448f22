"""
Confidence Scorer - Calculates header match scores and mapping confidence
"""
from typing import List, Optional, Tuple

from .config_manager import ConfigManager
from .pattern_matcher import PatternMatcher


class ConfidenceScorer:
    """Calculates confidence scores for header cells and column mappings."""

    def __init__(self, config_manager: ConfigManager, pattern_matcher: Optional[PatternMatcher] = None):
        self.config_manager = config_manager
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self.synonyms = config_manager.get_synonyms()
        self.fuzzy_min_length = config_manager.get_threshold('fuzzy_min_length')
        self.fuzzy_max_distance = config_manager.get_threshold('fuzzy_max_distance')
        self.substring_cap = config_manager.get_threshold('substring_cap')
        self.fuzzy_cap = config_manager.get_threshold('fuzzy_cap')

    def score_header_cell(self, normalized: str) -> Tuple[int, List[str]]:
        """
        Score one normalized header cell against every canonical column.

        Each canonical column contributes at most once: its first synonym
        that is equal to or contained in the cell adds the column weight,
        otherwise a synonym within edit distance adds the fuzzy weight.
        """
        if not normalized:
            return 0, []

        score = 0
        matched = []
        fuzzy_weight = self.config_manager.get_header_weight('fuzzy')

        for canonical, synonyms in self.synonyms.items():
            for synonym in synonyms:
                if normalized == synonym or synonym in normalized:
                    score += self.config_manager.get_header_weight(canonical)
                    matched.append(canonical)
                    break
                if len(synonym) >= self.fuzzy_min_length and self.pattern_matcher.within_distance(
                        normalized, synonym, self.fuzzy_max_distance) is not None:
                    score += fuzzy_weight
                    matched.append(f"{canonical}(fuzzy)")
                    break

        return score, matched

    def column_match_confidence(self, normalized: str, synonym: str) -> float:
        """
        Confidence that a header cell names the given synonym.

        Exact match scores 1.0. Containment in either direction scores the
        length-overlap ratio scaled below 1.0. A fuzzy match on longer
        synonyms scores (1 - distance/length) scaled lower still.
        """
        if not normalized or not synonym:
            return 0.0
        if normalized == synonym:
            return 1.0

        confidence = 0.0
        if synonym in normalized or normalized in synonym:
            ratio = min(len(normalized), len(synonym)) / max(len(normalized), len(synonym))
            confidence = ratio * self.substring_cap

        if len(synonym) >= self.fuzzy_min_length:
            distance = self.pattern_matcher.within_distance(normalized, synonym, self.fuzzy_max_distance)
            if distance is not None:
                confidence = max(confidence, (1 - distance / len(synonym)) * self.fuzzy_cap)

        return round(confidence, 4)

    def best_column_match(self, normalized: str) -> Optional[Tuple[str, float]]:
        """Highest-confidence canonical column for a header cell. Ties keep table order."""
        best = None
        for canonical, synonyms in self.synonyms.items():
            for synonym in synonyms:
                confidence = self.column_match_confidence(normalized, synonym)
                if confidence > 0 and (best is None or confidence > best[1]):
                    best = (canonical, confidence)
                if best and best[1] == 1.0:
                    return best
        return best

    def mapping_confidence(self, has_item: bool, has_cost: bool, has_markup: bool,
                           unmapped_count: int) -> float:
        """Overall mapping confidence: 1.0 minus fixed penalties, floored at 0."""
        confidence = 1.0
        if not has_item:
            confidence -= self.config_manager.get_penalty('missing_item')
        if not has_cost:
            confidence -= self.config_manager.get_penalty('missing_cost')
        if not has_markup:
            confidence -= self.config_manager.get_penalty('missing_markup')
        if unmapped_count > self.config_manager.get_threshold('max_unmapped_headers'):
            confidence -= self.config_manager.get_penalty('too_many_unmapped')
        return round(max(0.0, confidence), 4)
