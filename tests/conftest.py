import pytest

from budget_import.models import Grid
from budget_import.orchestration import BudgetSheetImporter
from budget_import.shared_utils import ConfigManager, ConfidenceScorer, PatternMatcher
from budget_import.extraction import ColumnMapper, LineItemExtractor

BUDGET_HEADER = ['Item', 'Subcontractor', 'Labor', 'Material', 'Sub', 'Markup']

# Simplified UC Neuro budget sheet
NEURO_ROWS = [
    ['Item', 'Subcontractor', 'Labor ', 'Material', 'Sub', 'Total', 'Markup', 'Total with Mark Up'],
    ['', '', '', '', '$0.00', '30.00%', '$0.00', '$0.00'],
    ['Ceilings', 'Cincinnati Interiors', '', '$0.00', '$24,970.00', '$24,970.00', '25.00%', '$31,212.50'],
    ['Demo', 'RCG', '$15,000.00', '$6,000.00', '$0.00', '$21,000.00', '25.00%', '$26,250.00'],
    ['Framing', 'Ron Mullekin', '', '$10,000.00', '$27,000.00', '$37,000.00', '25.00%', '$46,250.00'],
    ['Supervision', 'RCG', '$45,093.00', '$0.00', '$0.00', '$45,093.00', '0.00%', '$45,093.00'],
    ['', '', '', '', '', '', '', ''],
    ['', '', '$60,093.00', '$16,000.00', '$51,970.00', '$128,063.00', '', '$148,805.50'],
    ['', '', '', '', '', '', 'Total Cost', ''],
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('BUDGET_IMPORT_CONFIG', 'BUDGET_IMPORT_ASSISTANT_URL',
                 'BUDGET_IMPORT_ASSISTANT_MODEL', 'BUDGET_IMPORT_ASSISTANT_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_manager():
    return ConfigManager()


@pytest.fixture
def scorer(config_manager):
    return ConfidenceScorer(config_manager, PatternMatcher())


@pytest.fixture
def mapper(config_manager, scorer):
    return ColumnMapper(config_manager, scorer)


@pytest.fixture
def importer(config_manager):
    return BudgetSheetImporter(config_manager)


@pytest.fixture
def neuro_grid():
    return Grid.from_rows(NEURO_ROWS)


@pytest.fixture
def extract_rows(config_manager, mapper):
    """Map row 0 as the header and extract every following row."""
    extractor = LineItemExtractor(config_manager)

    def _extract(rows):
        grid = Grid.from_rows(rows)
        mapping = mapper.map_columns(grid, 0)
        return extractor.extract_line_items(grid, mapping, 1, grid.row_count)

    return _extract
