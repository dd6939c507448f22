"""
Line Item Extractor - Turns table rows into cost line items, splitting compound rows
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models.extraction_models import (
    CanonicalColumn,
    ColumnMapping,
    CostComponent,
    ExtractedLineItem,
    Grid,
    ImportWarning,
    RawCells,
    WarningCode
)
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.pattern_matcher import PatternMatcher
from ..shared_utils.text_cleaner import TextCleaner
from ..shared_utils.amount_parser import is_currency_shaped, parse_markup, parse_money, round2

logger = logging.getLogger(__name__)

MATERIALS_SUFFIX = " - Materials"

_COMPONENT_COLUMNS = (
    (CostComponent.LABOR, CanonicalColumn.LABOR),
    (CostComponent.MATERIAL, CanonicalColumn.MATERIAL),
    (CostComponent.SUB, CanonicalColumn.SUB),
)


@dataclass(frozen=True)
class LineItemExtraction:
    """Items and diagnostics from one pass over the table region."""
    items: Tuple[ExtractedLineItem, ...]
    warnings: Tuple[ImportWarning, ...]
    compound_rows_split: int = 0


class LineItemExtractor:
    """Extracts typed cost line items and decomposes rows that mix cost components."""

    def __init__(self, config_manager: ConfigManager, pattern_matcher: Optional[PatternMatcher] = None,
                 text_cleaner: Optional[TextCleaner] = None):
        self.config_manager = config_manager
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self.text_cleaner = text_cleaner or TextCleaner()
        self.summary_indicators = config_manager.get_list('summary_indicators')
        self.internal_vendor = config_manager.get_vendor_sentinel()
        self.zero_tolerance = config_manager.get_threshold('zero_tolerance')

    def _cell(self, grid: Grid, row_index: int, mapping: ColumnMapping, canonical: CanonicalColumn) -> Optional[str]:
        col_index = mapping.index_of(canonical)
        if col_index is None:
            return None
        return grid.cell(row_index, col_index).strip()

    def _assign_vendor(self, component: CostComponent, vendor_cell: Optional[str]) -> Optional[str]:
        """
        Subcontract components take the vendor cell as written.
        Labor and material default to the internal vendor unless another vendor is named.
        """
        vendor = (vendor_cell or '').strip()
        if component is CostComponent.SUB:
            return vendor or None
        if not vendor or vendor.upper() == self.internal_vendor.upper():
            return self.internal_vendor
        return vendor

    def _partition(self, costs: List[float]) -> List[float]:
        """Round each component to cents so the parts add up to the rounded row total."""
        rounded = [round2(c) for c in costs]
        if len(rounded) > 1:
            rounded[-1] = round2(round2(sum(costs)) - sum(rounded[:-1]))
        return rounded

    def extract_line_items(self, grid: Grid, mapping: ColumnMapping,
                           start_row: int, end_row: int) -> LineItemExtraction:
        """
        Extract items from rows [start_row, end_row).

        Rows without item text or with summary wording are skipped with a
        diagnostic. Each non-zero labor, material and sub cell becomes one
        item; rows with more than one are split.
        """
        items: List[ExtractedLineItem] = []
        warnings: List[ImportWarning] = []
        compound_rows_split = 0

        for row_index in range(start_row, end_row):
            display_row = row_index + 1
            item_text = self._cell(grid, row_index, mapping, CanonicalColumn.ITEM) or ''

            if self.text_cleaner.is_blank(item_text):
                amounts = [c for c in grid.rows[row_index] if is_currency_shaped(c)]
                if amounts:
                    warnings.append(ImportWarning(
                        code=WarningCode.SKIPPED_EMPTY_ROW,
                        message=f'Skipped row {display_row}: amounts without an item description',
                        row_index=row_index,
                        details={'amounts': amounts}
                    ))
                continue

            indicator = self.pattern_matcher.find_phrase(item_text, self.summary_indicators)
            if indicator:
                warnings.append(ImportWarning(
                    code=WarningCode.SKIPPED_SUMMARY_ROW,
                    message=f'Skipped summary row: "{item_text}"',
                    row_index=row_index,
                    details={'indicator': indicator}
                ))
                continue

            raw = RawCells(
                vendor_cell=self._cell(grid, row_index, mapping, CanonicalColumn.VENDOR) or None,
                labor_cell=self._cell(grid, row_index, mapping, CanonicalColumn.LABOR) or None,
                material_cell=self._cell(grid, row_index, mapping, CanonicalColumn.MATERIAL) or None,
                sub_cell=self._cell(grid, row_index, mapping, CanonicalColumn.SUB) or None,
                markup_cell=self._cell(grid, row_index, mapping, CanonicalColumn.MARKUP) or None,
                total_with_markup_cell=self._cell(grid, row_index, mapping, CanonicalColumn.TOTAL_WITH_MARKUP) or None
            )

            components: List[Tuple[CostComponent, float]] = []
            for component, canonical in _COMPONENT_COLUMNS:
                cell_text = self._cell(grid, row_index, mapping, canonical)
                parsed = parse_money(cell_text)
                if not parsed.parseable:
                    warnings.append(ImportWarning(
                        code=WarningCode.UNPARSEABLE_CURRENCY,
                        message=f'Could not read {component.value} amount "{cell_text}" for "{item_text}"; treated as 0',
                        row_index=row_index,
                        details={'component': component.value, 'raw': cell_text}
                    ))
                    continue
                if parsed.negative:
                    warnings.append(ImportWarning(
                        code=WarningCode.NEGATIVE_VALUE,
                        message=f'Negative {component.value} amount "{cell_text}" for "{item_text}" imported as {parsed.value:,.2f}',
                        row_index=row_index,
                        details={'component': component.value, 'raw': cell_text, 'imported_as': parsed.value}
                    ))
                if parsed.value > self.zero_tolerance:
                    components.append((component, parsed.value))

            if not components:
                warnings.append(ImportWarning(
                    code=WarningCode.SKIPPED_EMPTY_ROW,
                    message=f'Skipped row with no costs: "{item_text}"',
                    row_index=row_index
                ))
                continue

            markup = parse_markup(raw.markup_cell)
            markup_pct = markup.value
            if not markup.parseable:
                warnings.append(ImportWarning(
                    code=WarningCode.UNPARSEABLE_PERCENT,
                    message=f'Could not read markup "{raw.markup_cell}" for "{item_text}"',
                    row_index=row_index,
                    details={'raw': raw.markup_cell}
                ))
            if markup.negative:
                warnings.append(ImportWarning(
                    code=WarningCode.NEGATIVE_VALUE,
                    message=f'Negative markup "{raw.markup_cell}" for "{item_text}" imported as {markup_pct:.2%}',
                    row_index=row_index,
                    details={'component': 'markup', 'raw': raw.markup_cell, 'imported_as': markup_pct}
                ))
            if markup_pct is None:
                warnings.append(ImportWarning(
                    code=WarningCode.MARKUP_MISSING,
                    message=f'Markup missing for "{item_text}"',
                    row_index=row_index
                ))

            needs_split = len(components) > 1
            if needs_split:
                compound_rows_split += 1
                logger.debug(f"Row {display_row} '{item_text}' split into {[c.value for c, _ in components]}")

            costs = self._partition([cost for _, cost in components])
            for (component, _), cost in zip(components, costs):
                if component is CostComponent.MATERIAL and needs_split:
                    name = f"{item_text}{MATERIALS_SUFFIX}"
                else:
                    name = item_text

                price = round2(cost * (1 + markup_pct)) if markup_pct is not None else None

                items.append(ExtractedLineItem(
                    source_row_index=display_row,
                    source_item_name_raw=item_text,
                    name=name,
                    component=component,
                    vendor_name=self._assign_vendor(component, raw.vendor_cell),
                    cost=cost,
                    markup_pct=markup_pct,
                    price=price,
                    was_split=needs_split,
                    split_from_name=item_text if needs_split else None,
                    raw=raw
                ))

        logger.info(
            f"Extracted {len(items)} line items from rows {start_row}-{end_row - 1} "
            f"({compound_rows_split} compound rows split)"
        )
        return LineItemExtraction(
            items=tuple(items),
            warnings=tuple(warnings),
            compound_rows_split=compound_rows_split
        )
