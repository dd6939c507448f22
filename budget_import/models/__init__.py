"""
Models Package
"""
from .extraction_models import (
    CanonicalColumn,
    COST_COLUMNS,
    CostComponent,
    ItemCategory,
    WarningCode,
    Grid,
    ImportWarning,
    HeaderCandidate,
    ColumnMapping,
    TableRegion,
    RawCells,
    ExtractedLineItem,
    EnrichedLineItem,
    ExtractionMetadata,
    ExtractionResult,
    ImportResult,
    ImportSummary
)

__all__ = [
    'CanonicalColumn',
    'COST_COLUMNS',
    'CostComponent',
    'ItemCategory',
    'WarningCode',
    'Grid',
    'ImportWarning',
    'HeaderCandidate',
    'ColumnMapping',
    'TableRegion',
    'RawCells',
    'ExtractedLineItem',
    'EnrichedLineItem',
    'ExtractionMetadata',
    'ExtractionResult',
    'ImportResult',
    'ImportSummary'
]
