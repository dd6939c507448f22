"""
Budget Extraction Module - Deterministic Line-Item Extraction Stages

Handles the money-bearing stages of an import:
- Header row location
- Column mapping to canonical columns
- Table region detection
- Line-item extraction and compound-row splitting
- Totals sanity check

Exports:
- HeaderRowLocator: Scores rows to find the header row
- ColumnMapper: Maps header cells to canonical columns
- TableRegionDetector: Finds where the line-item table ends
- LineItemExtractor: Extracts and splits line items
- TotalsValidator: Aggregate cost vs. price check
"""

from .header_locator import HeaderRowLocator
from .column_mapper import ColumnMapper
from .region_detector import TableRegionDetector
from .line_item_extractor import LineItemExtractor, LineItemExtraction, MATERIALS_SUFFIX
from .totals_validator import TotalsValidator, compute_totals

__all__ = [
    'HeaderRowLocator',
    'ColumnMapper',
    'TableRegionDetector',
    'LineItemExtractor',
    'LineItemExtraction',
    'MATERIALS_SUFFIX',
    'TotalsValidator',
    'compute_totals'
]
