"""
Column Mapper - Assigns header cells to canonical semantic columns
"""
import logging
from typing import Dict, List, Optional, Tuple

from ..models.extraction_models import (
    CanonicalColumn,
    ColumnMapping,
    Grid,
    ImportWarning,
    WarningCode
)
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.confidence_scorer import ConfidenceScorer
from ..shared_utils.text_cleaner import TextCleaner

logger = logging.getLogger(__name__)

_CANONICAL_BY_NAME = {c.value: c for c in CanonicalColumn}


class ColumnMapper:
    """Maps a header row onto canonical columns via exact, substring and fuzzy matching."""

    def __init__(self, config_manager: ConfigManager, confidence_scorer: ConfidenceScorer,
                 text_cleaner: Optional[TextCleaner] = None):
        self.config_manager = config_manager
        self.confidence_scorer = confidence_scorer
        self.text_cleaner = text_cleaner or TextCleaner()
        self.accept_threshold = config_manager.get_threshold('mapping_accept')
        self.low_confidence = config_manager.get_threshold('low_confidence_mapping')

    def map_columns(self, grid: Grid, header_row_index: int) -> ColumnMapping:
        """
        Map each header cell to its best canonical column.

        A match is accepted at or above the acceptance threshold. When two
        cells compete for one canonical column the higher confidence keeps
        it (the earlier cell on a tie) and the other is reported unmapped.
        """
        header_row = grid.rows[header_row_index]
        warnings: List[ImportWarning] = []
        unmapped: List[Tuple[int, str]] = []
        claims: Dict[CanonicalColumn, Tuple[int, float]] = {}

        for col_index, cell in enumerate(header_row):
            normalized = self.text_cleaner.normalize_header(cell)
            if not normalized:
                continue

            match = self.confidence_scorer.best_column_match(normalized)
            if match is None or match[1] < self.accept_threshold:
                unmapped.append((col_index, cell))
                continue

            # recognised headers with no imported role (profit) are neither mapped nor unmapped
            canonical = _CANONICAL_BY_NAME.get(match[0])
            if canonical is None:
                logger.debug(f"Ignoring '{cell}' column ({match[0]})")
                continue

            confidence = match[1]
            claimed = claims.get(canonical)
            if claimed is None:
                claims[canonical] = (col_index, confidence)
                continue

            claimed_index, claimed_confidence = claimed
            if confidence > claimed_confidence:
                claims[canonical] = (col_index, confidence)
                loser_index = claimed_index
            else:
                loser_index = col_index
            unmapped.append((loser_index, header_row[loser_index]))
            warnings.append(ImportWarning(
                code=WarningCode.COLUMN_AMBIGUOUS,
                message=f'Several headers match "{canonical.value}"; using column {claims[canonical][0] + 1}',
                row_index=header_row_index,
                details={
                    'canonical': canonical.value,
                    'kept_column': claims[canonical][0],
                    'ignored_column': loser_index,
                    'ignored_header': header_row[loser_index]
                }
            ))

        columns = {col_index: canonical for canonical, (col_index, _) in claims.items()}
        unmapped_headers = tuple(text for _, text in sorted(unmapped))

        has_item = CanonicalColumn.ITEM in claims
        has_cost = any(c in claims for c in (CanonicalColumn.LABOR, CanonicalColumn.MATERIAL, CanonicalColumn.SUB))
        has_markup = CanonicalColumn.MARKUP in claims

        if not has_item:
            warnings.append(ImportWarning(
                code=WarningCode.COLUMN_MISSING,
                message='Item column not found',
                row_index=header_row_index,
                details={'column': 'item', 'fatal': True}
            ))
        if not has_cost:
            warnings.append(ImportWarning(
                code=WarningCode.COLUMN_MISSING,
                message='No cost columns (Labor/Material/Sub) found',
                row_index=header_row_index,
                details={'column': 'cost', 'fatal': True}
            ))
        if not has_markup:
            warnings.append(ImportWarning(
                code=WarningCode.COLUMN_MISSING,
                message='Markup column not found; prices will be left empty',
                row_index=header_row_index,
                details={'column': 'markup', 'fatal': False}
            ))

        confidence = self.confidence_scorer.mapping_confidence(
            has_item, has_cost, has_markup, len(unmapped_headers)
        )
        if confidence < self.low_confidence:
            warnings.append(ImportWarning(
                code=WarningCode.LOW_CONFIDENCE_MAPPING,
                message=f'Column mapping confidence is low ({confidence:.0%}); review the detected columns',
                row_index=header_row_index,
                details={'confidence': confidence, 'unmapped_headers': list(unmapped_headers)}
            ))

        logger.info(
            f"Mapped {len(columns)} columns from header row {header_row_index} "
            f"(confidence={confidence:.2f}, unmapped={len(unmapped_headers)})"
        )
        return ColumnMapping(
            columns=dict(sorted(columns.items())),
            header_row_index=header_row_index,
            confidence=confidence,
            unmapped_headers=unmapped_headers,
            warnings=tuple(warnings)
        )
