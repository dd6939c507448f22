"""
Budget Sheet Importer - End-to-End Budget Sheet Import

Runs the import stages in order:
1. Grid reading (file path or bytes, optional)
2. Header row location
3. Column mapping
4. Table region detection
5. Line-item extraction and compound splitting
6. Totals validation
7. Category classification and labor rates

Usage:
    from budget_import.orchestration import get_budget_sheet_importer

    importer = get_budget_sheet_importer()
    result = importer.import_budget_file("budget.xlsx")
"""
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..classification.category_classifier import (
    CategoryClassifier,
    DeterministicClassifier,
    build_classifier
)
from ..extraction.column_mapper import ColumnMapper
from ..extraction.header_locator import HeaderRowLocator
from ..extraction.line_item_extractor import LineItemExtractor
from ..extraction.region_detector import TableRegionDetector
from ..extraction.totals_validator import TotalsValidator, compute_totals
from ..grid.grid_normalizer import GridNormalizer
from ..models.extraction_models import (
    CostComponent,
    EnrichedLineItem,
    ExtractionMetadata,
    ExtractionResult,
    Grid,
    ImportResult,
    ImportWarning,
    ItemCategory,
    WarningCode
)
from ..shared_utils.config_manager import ConfigManager, get_config_manager
from ..shared_utils.confidence_scorer import ConfidenceScorer
from ..shared_utils.pattern_matcher import PatternMatcher
from ..shared_utils.text_cleaner import TextCleaner

logger = logging.getLogger(__name__)


@dataclass
class ImportOptions:
    """Per-import switches. None falls back to configuration."""
    use_assistant: Optional[bool] = None
    labor_billing_rate: Optional[float] = None
    labor_actual_rate: Optional[float] = None


class BudgetSheetImporter:
    """
    Budget sheet import pipeline.

    Dollar amounts come only from the extraction stages; classification
    runs afterwards and never changes item count, cost or price.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.config_manager = config_manager or get_config_manager()
        self.text_cleaner = TextCleaner()
        self.pattern_matcher = PatternMatcher()
        self.confidence_scorer = ConfidenceScorer(self.config_manager, self.pattern_matcher)

        self.grid_normalizer = GridNormalizer(self.text_cleaner)
        self.header_locator = HeaderRowLocator(self.config_manager, self.confidence_scorer, self.text_cleaner)
        self.column_mapper = ColumnMapper(self.config_manager, self.confidence_scorer, self.text_cleaner)
        self.region_detector = TableRegionDetector(self.config_manager, self.pattern_matcher, self.text_cleaner)
        self.line_item_extractor = LineItemExtractor(self.config_manager, self.pattern_matcher, self.text_cleaner)
        self.totals_validator = TotalsValidator(self.config_manager)
        self.deterministic_classifier = DeterministicClassifier(self.config_manager)

        logger.info("BudgetSheetImporter initialized")

    def extract_budget_sheet(self, grid: Grid, request_id: Optional[str] = None) -> ExtractionResult:
        """
        Deterministic extraction of line items from a grid.

        A missing header row, item column or cost column stops the run with
        success=False, no items and the diagnostics gathered so far.
        """
        request_id = request_id or f"imp_{int(time.time() * 1000)}"
        warnings: List[ImportWarning] = []

        logger.info(f"[{request_id}] Step 2: Header row location ({grid.row_count} rows)...")
        header = self.header_locator.find_header_row(grid)
        if header is None:
            logger.warning(f"[{request_id}] No header row found, aborting")
            return ExtractionResult(
                success=False,
                items=(),
                warnings=(ImportWarning(
                    code=WarningCode.HEADER_NOT_FOUND,
                    message='Could not detect header row'
                ),),
                metadata=ExtractionMetadata(stop_reason='Header not found')
            )

        logger.info(f"[{request_id}] Step 3: Column mapping (header row {header.row_index})...")
        mapping = self.column_mapper.map_columns(grid, header.row_index)
        warnings.extend(mapping.warnings)
        if not mapping.has_item_column or not mapping.has_cost_column:
            logger.warning(f"[{request_id}] Required columns missing, aborting")
            return ExtractionResult(
                success=False,
                items=(),
                warnings=tuple(warnings),
                metadata=ExtractionMetadata(
                    header_row_index=header.row_index,
                    stop_reason='Required columns missing',
                    mapping_confidence=mapping.confidence
                )
            )

        logger.info(f"[{request_id}] Step 4: Table region detection...")
        region = self.region_detector.detect_table_region(grid, header.row_index, mapping)
        warnings.extend(region.warnings)

        logger.info(f"[{request_id}] Step 5: Line item extraction (rows {region.start_row}-{region.end_row - 1})...")
        extraction = self.line_item_extractor.extract_line_items(grid, mapping, region.start_row, region.end_row)
        warnings.extend(extraction.warnings)

        logger.info(f"[{request_id}] Step 6: Totals validation...")
        warnings.extend(self.totals_validator.validate_totals(extraction.items))
        total_cost, total_price = compute_totals(extraction.items)

        logger.info(
            f"[{request_id}] Extracted {len(extraction.items)} items, "
            f"cost={total_cost:,.2f}, price={total_price:,.2f}, warnings={len(warnings)}"
        )
        return ExtractionResult(
            success=len(extraction.items) > 0,
            items=extraction.items,
            warnings=tuple(warnings),
            metadata=ExtractionMetadata(
                header_row_index=header.row_index,
                stop_row_index=region.end_row,
                stop_reason=region.stop_reason,
                rows_scanned=region.end_row - region.start_row,
                rows_extracted=len(extraction.items),
                compound_rows_split=extraction.compound_rows_split,
                mapping_confidence=mapping.confidence,
                total_cost=total_cost,
                total_price=total_price
            )
        )

    def _apply_labor_rates(self, items, billing_rate: float, actual_rate: float) -> List[EnrichedLineItem]:
        return [
            item.with_labor_rates(billing_rate, actual_rate)
            if item.category is ItemCategory.LABOR_INTERNAL and item.component is CostComponent.LABOR
            else item
            for item in items
        ]

    def import_budget_sheet(self, grid: Grid, options: Optional[ImportOptions] = None,
                            classifier: Optional[CategoryClassifier] = None,
                            request_id: Optional[str] = None) -> ImportResult:
        """
        Extract, classify and attach labor rates.

        Args:
            grid: Source grid
            options: Assistant switch and labor rate overrides
            classifier: Explicit classifier; built from configuration when omitted
            request_id: Optional request tracking ID

        Returns:
            ImportResult; unsuccessful extractions come back with no items
        """
        options = options or ImportOptions()
        request_id = request_id or f"imp_{int(time.time() * 1000)}"

        extraction = self.extract_budget_sheet(grid, request_id=request_id)
        if not extraction.success:
            return ImportResult(
                success=False,
                items=(),
                warnings=extraction.warnings,
                metadata=extraction.metadata
            )

        logger.info(f"[{request_id}] Step 7: Category classification...")
        classifier = classifier or build_classifier(self.config_manager, options.use_assistant)
        try:
            classification = classifier.classify(extraction.items)
        except Exception as e:
            logger.error(f"[{request_id}] Classifier failed, using deterministic categories: {e}")
            classification = self.deterministic_classifier.classify(extraction.items)

        rates = self.config_manager.get_labor_rates()
        billing_rate = options.labor_billing_rate if options.labor_billing_rate is not None else rates['billing_rate']
        actual_rate = options.labor_actual_rate if options.labor_actual_rate is not None else rates['actual_rate']
        items = self._apply_labor_rates(classification.items, billing_rate, actual_rate)

        logger.info(
            f"[{request_id}] Import complete: {len(items)} items, "
            f"enrichment_used={classification.enrichment_used}"
        )
        return ImportResult(
            success=True,
            items=tuple(items),
            warnings=extraction.warnings,
            metadata=extraction.metadata,
            enrichment_used=classification.enrichment_used
        )

    def import_budget_file(self, source: Union[str, Path, bytes], filename: Optional[str] = None,
                           options: Optional[ImportOptions] = None,
                           sheet_name: Union[int, str] = 0) -> ImportResult:
        """
        Read a budget file and import it.

        Raises:
            GridReadError: the file could not be read into a grid
        """
        request_id = f"imp_{int(time.time() * 1000)}"
        label = filename or ('<bytes>' if isinstance(source, (bytes, bytearray)) else str(source))
        logger.info(f"[{request_id}] Step 1: Reading {label}...")
        grid = self.grid_normalizer.read_grid(source, filename=filename, sheet_name=sheet_name)
        return self.import_budget_sheet(grid, options, request_id=request_id)


# Singleton instance
_budget_sheet_importer_instance = None


def get_budget_sheet_importer() -> BudgetSheetImporter:
    """Get or create singleton BudgetSheetImporter instance."""
    global _budget_sheet_importer_instance

    if _budget_sheet_importer_instance is None:
        _budget_sheet_importer_instance = BudgetSheetImporter()

    return _budget_sheet_importer_instance


def extract_budget_sheet(grid: Grid) -> ExtractionResult:
    """Deterministic extraction with the shared importer."""
    return get_budget_sheet_importer().extract_budget_sheet(grid)


def import_budget_sheet(grid: Grid, options: Optional[ImportOptions] = None) -> ImportResult:
    """Full import with the shared importer."""
    return get_budget_sheet_importer().import_budget_sheet(grid, options)
