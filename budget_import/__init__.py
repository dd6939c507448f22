"""
Budget Import Module - Budget Sheet to Estimate Line Items

Organized into 7 functional components:

📂 orchestration/ - Main API entry points
   ├─ BudgetSheetImporter: Main orchestrator
   ├─ ImportOptions: Per-import switches
   └─ Singleton accessors

📂 grid/ - Source file reading
   └─ GridNormalizer: CSV/TSV text and Excel workbooks to a Grid

📂 extraction/ - Deterministic, money-bearing stages
   ├─ HeaderRowLocator: Header row scoring
   ├─ ColumnMapper: Header cells to canonical columns
   ├─ TableRegionDetector: Stop phrases and empty-row runs
   ├─ LineItemExtractor: Line items and compound-row splitting
   └─ TotalsValidator: Aggregate cost vs. price check

📂 classification/ - Line item categories
   ├─ DeterministicClassifier: Rule list + cost component
   ├─ AssistedClassifier: Assistant categories with whole-batch fallback
   └─ AssistantClient: Ollama-style classification client

📂 conversion/ - Estimate records
   ├─ convert_to_estimate_line_items()
   └─ summarize_import()

📂 models/ - Dataclasses and enums

📂 shared_utils/ - Config, text cleaning, matching, amount parsing

QUICK START:
    from budget_import import get_budget_sheet_importer, convert_to_estimate_line_items

    importer = get_budget_sheet_importer()
    result = importer.import_budget_file("budget.xlsx")
    records = convert_to_estimate_line_items(result.items)
"""

from .exceptions import BudgetImportError, GridReadError, AssistantError

# Import main orchestrator
from .orchestration import (
    BudgetSheetImporter,
    ImportOptions,
    get_budget_sheet_importer,
    extract_budget_sheet,
    import_budget_sheet
)

# Import grid reading
from .grid import GridNormalizer, get_grid_normalizer

# Import classifiers
from .classification import (
    CategoryClassifier,
    DeterministicClassifier,
    AssistedClassifier,
    AssistantClient,
    build_classifier
)

# Import conversion
from .conversion import (
    EstimateLineItem,
    convert_to_estimate_line_items,
    summarize_import
)

# Import models
from .models import (
    CanonicalColumn,
    CostComponent,
    ItemCategory,
    WarningCode,
    Grid,
    ImportWarning,
    ExtractedLineItem,
    EnrichedLineItem,
    ExtractionResult,
    ImportResult,
    ImportSummary
)

from .shared_utils import ConfigManager, get_config_manager

__all__ = [
    # Errors
    'BudgetImportError',
    'GridReadError',
    'AssistantError',

    # Orchestration
    'BudgetSheetImporter',
    'ImportOptions',
    'get_budget_sheet_importer',
    'extract_budget_sheet',
    'import_budget_sheet',

    # Grid
    'GridNormalizer',
    'get_grid_normalizer',

    # Classification
    'CategoryClassifier',
    'DeterministicClassifier',
    'AssistedClassifier',
    'AssistantClient',
    'build_classifier',

    # Conversion
    'EstimateLineItem',
    'convert_to_estimate_line_items',
    'summarize_import',

    # Models
    'CanonicalColumn',
    'CostComponent',
    'ItemCategory',
    'WarningCode',
    'Grid',
    'ImportWarning',
    'ExtractedLineItem',
    'EnrichedLineItem',
    'ExtractionResult',
    'ImportResult',
    'ImportSummary',

    # Config
    'ConfigManager',
    'get_config_manager'
]
