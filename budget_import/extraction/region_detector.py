"""
Table Region Detector - Finds where the line-item table ends
"""
import logging
from typing import Optional

from ..models.extraction_models import (
    COST_COLUMNS,
    CanonicalColumn,
    ColumnMapping,
    Grid,
    ImportWarning,
    TableRegion,
    WarningCode
)
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.pattern_matcher import PatternMatcher
from ..shared_utils.text_cleaner import TextCleaner
from ..shared_utils.amount_parser import parse_money

logger = logging.getLogger(__name__)


class TableRegionDetector:
    """Detects the end of the line-item table by stop phrases or a run of empty rows."""

    def __init__(self, config_manager: ConfigManager, pattern_matcher: Optional[PatternMatcher] = None,
                 text_cleaner: Optional[TextCleaner] = None):
        self.config_manager = config_manager
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self.text_cleaner = text_cleaner or TextCleaner()
        self.stop_markers = config_manager.get_stop_markers()
        self.empty_run_length = config_manager.get_threshold('empty_run_length')

    def is_structurally_empty(self, grid: Grid, row_index: int, mapping: ColumnMapping) -> bool:
        """Blank item cell and every mapped cost cell blank or zero."""
        item_cell = grid.cell(row_index, mapping.index_of(CanonicalColumn.ITEM))
        if not self.text_cleaner.is_blank(item_cell):
            return False
        for canonical in COST_COLUMNS:
            col_index = mapping.index_of(canonical)
            if col_index is None:
                continue
            parsed = parse_money(grid.cell(row_index, col_index))
            if parsed.parseable and parsed.value != 0:
                return False
        return True

    def detect_table_region(self, grid: Grid, header_row_index: int, mapping: ColumnMapping) -> TableRegion:
        """
        Scan rows after the header.

        A stop phrase anywhere in a row ends the table before that row.
        A run of empty rows ends the table at the first row of the run.
        Otherwise the table runs to the end of the grid.
        """
        start_row = header_row_index + 1
        consecutive_empty = 0

        for row_index in range(start_row, grid.row_count):
            row_text = self.text_cleaner.row_text(grid.rows[row_index])
            marker = self.pattern_matcher.find_phrase(row_text, self.stop_markers)
            if marker:
                reason = f'Stop marker found: "{marker}"'
                logger.info(f"Table ends before row {row_index}: {reason}")
                return TableRegion(
                    start_row=start_row,
                    end_row=row_index,
                    stop_reason=reason,
                    stop_marker=marker,
                    warnings=(ImportWarning(
                        code=WarningCode.STOP_MARKER_FOUND,
                        message=reason,
                        row_index=row_index,
                        details={'marker': marker}
                    ),)
                )

            if self.is_structurally_empty(grid, row_index, mapping):
                consecutive_empty += 1
                if consecutive_empty >= self.empty_run_length:
                    end_row = row_index - (self.empty_run_length - 1)
                    reason = f'Stopped after {self.empty_run_length} consecutive empty rows'
                    logger.info(f"Table ends at row {end_row}: {reason}")
                    return TableRegion(
                        start_row=start_row,
                        end_row=end_row,
                        stop_reason=reason,
                        warnings=(ImportWarning(
                            code=WarningCode.STOP_BY_STRUCTURE,
                            message=reason,
                            row_index=row_index,
                            details={'first_empty_row': end_row}
                        ),)
                    )
            else:
                consecutive_empty = 0

        logger.info(f"Table runs to end of grid (rows {start_row}-{grid.row_count - 1})")
        return TableRegion(start_row=start_row, end_row=grid.row_count)
