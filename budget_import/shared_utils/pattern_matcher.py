"""
Pattern Matcher - Handles phrase and fuzzy matching for extraction
"""
import re
from typing import Iterable, Optional, Pattern

from rapidfuzz.distance import Levenshtein


class PatternMatcher:
    """Handles phrase search and edit-distance operations for sheet extraction."""

    def __init__(self):
        self.cache = {}  # Cache compiled patterns for performance

    def compile_pattern(self, pattern_str: str, flags: int = re.IGNORECASE) -> Pattern:
        """Compile and cache regex pattern."""
        cache_key = f"{pattern_str}_{flags}"
        if cache_key not in self.cache:
            self.cache[cache_key] = re.compile(pattern_str, flags)
        return self.cache[cache_key]

    def search_pattern(self, text: str, pattern_str: str, flags: int = re.IGNORECASE):
        """Search for pattern in text (first match)."""
        pattern = self.compile_pattern(pattern_str, flags)
        return pattern.search(text)

    def find_phrase(self, text: str, phrases: Iterable[str]) -> Optional[str]:
        """
        Return the first phrase (in vocabulary order) contained in text.
        Matching is plain lowercase containment.
        """
        text_lower = text.lower()
        for phrase in phrases:
            if phrase and phrase.lower() in text_lower:
                return phrase
        return None

    def contains_word(self, text: str, words: Iterable[str]) -> Optional[str]:
        """
        Return the first word found on word boundaries, so short
        abbreviations ("pm") do not fire inside longer words.
        """
        for word in words:
            if word and self.search_pattern(text, rf"\b{re.escape(word)}\b"):
                return word
        return None

    def within_distance(self, a: str, b: str, max_distance: int) -> Optional[int]:
        """Distance when it is at most max_distance, else None."""
        distance = Levenshtein.distance(a, b, score_cutoff=max_distance)
        return distance if distance <= max_distance else None

