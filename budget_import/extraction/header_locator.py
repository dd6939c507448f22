"""
Header Row Locator - Scores candidate rows to find the column-header row
"""
import logging
from typing import List, Optional

from ..models.extraction_models import Grid, HeaderCandidate
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.confidence_scorer import ConfidenceScorer
from ..shared_utils.text_cleaner import TextCleaner
from ..shared_utils.amount_parser import is_currency_shaped

logger = logging.getLogger(__name__)


class HeaderRowLocator:
    """Finds the single best-scoring header row within the first rows of a grid."""

    def __init__(self, config_manager: ConfigManager, confidence_scorer: ConfidenceScorer,
                 text_cleaner: Optional[TextCleaner] = None):
        self.config_manager = config_manager
        self.confidence_scorer = confidence_scorer
        self.text_cleaner = text_cleaner or TextCleaner()
        self.max_rows = config_manager.get_threshold('max_header_rows')
        self.min_score = config_manager.get_threshold('min_header_score')
        self.max_currency_cells = config_manager.get_threshold('max_currency_cells_in_header')
        self.data_row_penalty = config_manager.get_header_weight('data_row_penalty')

    def score_row(self, cells) -> HeaderCandidate:
        """Score one row. Rows carrying many amounts look like data and are penalized."""
        score = 0
        matched: List[str] = []
        for cell in cells:
            cell_score, cell_matches = self.confidence_scorer.score_header_cell(
                self.text_cleaner.normalize_header(cell)
            )
            score += cell_score
            matched.extend(cell_matches)

        currency_count = sum(1 for cell in cells if is_currency_shaped(cell))
        if currency_count > self.max_currency_cells:
            score -= self.data_row_penalty

        return HeaderCandidate(row_index=-1, score=score, matched_headers=tuple(matched))

    def find_header_row(self, grid: Grid, max_rows: Optional[int] = None) -> Optional[HeaderCandidate]:
        """
        Return the highest-scoring row at or above the minimum score.

        Only the first max_rows rows are scanned. Equal scores keep the
        first row seen.
        """
        limit = min(grid.row_count, max_rows if max_rows is not None else self.max_rows)
        best: Optional[HeaderCandidate] = None

        for row_index in range(limit):
            scored = self.score_row(grid.rows[row_index])
            if scored.score < self.min_score:
                continue
            logger.debug(f"Header candidate row {row_index}: score={scored.score} {list(scored.matched_headers)}")
            if best is None or scored.score > best.score:
                best = HeaderCandidate(row_index=row_index, score=scored.score,
                                       matched_headers=scored.matched_headers)

        if best is None:
            logger.info(f"No header row found in first {limit} rows")
        else:
            logger.info(f"Header row {best.row_index} selected (score={best.score})")
        return best
