"""
Budget Orchestration Module - Main API Entry Points

Exports:
- BudgetSheetImporter: Main orchestrator combining all import stages
- ImportOptions: Per-import switches
- get_budget_sheet_importer(): Get singleton instance
- extract_budget_sheet() / import_budget_sheet(): Shortcuts on the singleton
"""

from .budget_sheet_importer import (
    BudgetSheetImporter,
    ImportOptions,
    get_budget_sheet_importer,
    extract_budget_sheet,
    import_budget_sheet
)

__all__ = [
    'BudgetSheetImporter',
    'ImportOptions',
    'get_budget_sheet_importer',
    'extract_budget_sheet',
    'import_budget_sheet'
]
