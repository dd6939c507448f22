"""
Budget Import Exceptions
"""


class BudgetImportError(Exception):
    """Base class for errors raised by the budget import package."""


class GridReadError(BudgetImportError):
    """A source file could not be read into a grid."""


class AssistantError(BudgetImportError):
    """The classification assistant failed or returned an unusable response."""
