import pytest

from budget_import.models import CostComponent, WarningCode
from budget_import.shared_utils import round2

from conftest import BUDGET_HEADER


def _codes(extraction):
    return [w.code for w in extraction.warnings]


def test_simple_subcontractor_item(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Ceilings', 'Cincinnati Interiors', '', '$0.00', '$24,970.00', '25.00%'],
    ])
    assert len(result.items) == 1
    item = result.items[0]
    assert item.name == 'Ceilings'
    assert item.component is CostComponent.SUB
    assert item.cost == 24970.0
    assert item.markup_pct == 0.25
    assert item.price == 31212.5
    assert item.vendor_name == 'Cincinnati Interiors'
    assert item.was_split is False
    assert item.split_from_name is None
    assert item.source_row_index == 2
    assert item.raw.sub_cell == '$24,970.00'
    assert item.raw.labor_cell is None


def test_splits_labor_and_material(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Demo', 'RCG', '$15,000.00', '$6,000.00', '$0.00', '25.00%'],
    ])
    assert result.compound_rows_split == 1
    labor, material = result.items

    assert labor.name == 'Demo'
    assert labor.component is CostComponent.LABOR
    assert labor.cost == 15000.0
    assert labor.vendor_name == 'RCG'
    assert labor.was_split is True
    assert labor.split_from_name == 'Demo'

    assert material.name == 'Demo - Materials'
    assert material.component is CostComponent.MATERIAL
    assert material.cost == 6000.0
    assert material.vendor_name == 'RCG'
    assert material.source_row_index == labor.source_row_index == 2


def test_splits_material_and_sub(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Framing', '', '', '$10,000.00', '$5,000.00', '20%'],
    ])
    material, sub = result.items
    assert (material.name, material.cost, material.price) == ('Framing - Materials', 10000.0, 12000.0)
    assert (sub.name, sub.cost, sub.price) == ('Framing', 5000.0, 6000.0)
    assert material.vendor_name == 'RCG'
    assert sub.vendor_name is None


def test_named_vendor_applies_to_every_component(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Framing', 'Ron Mullekin', '', '$10,000.00', '$27,000.00', '25.00%'],
    ])
    assert [i.vendor_name for i in result.items] == ['Ron Mullekin', 'Ron Mullekin']


def test_internal_vendor_is_matched_case_insensitively(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Trim', 'rcg', '$800.00', '', '', '10%'],
    ])
    assert result.items[0].vendor_name == 'RCG'


def test_material_only_row_keeps_plain_name(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Paint', '', '', '$500.00', '', '10%'],
    ])
    assert len(result.items) == 1
    assert result.items[0].name == 'Paint'
    assert result.items[0].was_split is False
    assert result.compound_rows_split == 0


def test_three_way_split_is_a_partition(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Kitchen', 'ABC Co', '$100.10', '$200.20', '$300.30', '10%'],
    ])
    assert [i.component for i in result.items] == [CostComponent.LABOR, CostComponent.MATERIAL, CostComponent.SUB]
    assert round2(sum(i.cost for i in result.items)) == 600.6


def test_sub_cent_amounts_still_sum_to_rounded_row_total(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Misc', '', '10.004', '5.004', '', '0%'],
    ])
    assert round2(sum(i.cost for i in result.items)) == round2(10.004 + 5.004) == 15.01


def test_missing_markup_leaves_price_empty(extract_rows):
    result = extract_rows([
        ['Item', 'Labor', 'Sub'],
        ['Demo', '$1,000.00', ''],
    ])
    assert result.items[0].price is None
    assert result.items[0].markup_pct is None
    assert WarningCode.MARKUP_MISSING in _codes(result)


def test_skips_summary_rows(extract_rows):
    result = extract_rows([
        ['Item', 'Sub'],
        ['HVAC', '$68,000'],
        ['Total', '$68,000'],
        ['Subtotal - Electrical', '$1,000'],
    ])
    assert [i.name for i in result.items] == ['HVAC']
    assert _codes(result).count(WarningCode.SKIPPED_SUMMARY_ROW) == 2


def test_skips_rows_without_item_or_cost(extract_rows):
    result = extract_rows([
        ['Item', 'Sub'],
        ['', ''],
        ['Paint', '$9,800'],
        ['', '$0.00'],
        ['Allowance', '$0.00'],
        ['Rounding', '$0.004'],
    ])
    assert [i.name for i in result.items] == ['Paint']
    empty = [w for w in result.warnings if w.code is WarningCode.SKIPPED_EMPTY_ROW]
    assert [w.row_index for w in empty] == [4, 5]


def test_amounts_without_item_are_reported(extract_rows):
    result = extract_rows([
        ['Item', 'Labor', 'Sub', 'Markup'],
        ['Paint', '', '$9,800', '10%'],
        ['', '$60,093.00', '$9,800', ''],
    ])
    assert len(result.items) == 1
    warning = result.warnings[0]
    assert warning.code is WarningCode.SKIPPED_EMPTY_ROW
    assert warning.details['amounts'] == ['$60,093.00', '$9,800']


def test_unparseable_amount_is_reported_not_guessed(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Electrical', 'Sparks LLC', 'TBD', '', '$2,000.00', '10%'],
    ])
    assert len(result.items) == 1
    assert result.items[0].component is CostComponent.SUB
    warning = result.warnings[0]
    assert warning.code is WarningCode.UNPARSEABLE_CURRENCY
    assert warning.details == {'component': 'labor', 'raw': 'TBD'}


def test_negative_amount_keeps_magnitude_and_is_reported(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Credit', 'Sparks LLC', '', '', '($250.00)', '10%'],
    ])
    assert result.items[0].cost == 250.0
    assert result.items[0].price == 275.0
    assert WarningCode.NEGATIVE_VALUE in _codes(result)


def test_unparseable_markup_is_treated_as_missing(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['Paint', '', '', '$500.00', '', 'n/a'],
    ])
    assert result.items[0].price is None
    assert _codes(result) == [WarningCode.UNPARSEABLE_PERCENT, WarningCode.MARKUP_MISSING]


@pytest.mark.parametrize("markup,price", [("25", 1250.0), ("0.25", 1250.0), ("1", 2000.0), ("0%", 1000.0)])
def test_markup_formats(extract_rows, markup, price):
    result = extract_rows([
        BUDGET_HEADER,
        ['Demo', '', '$1,000.00', '', '', markup],
    ])
    assert result.items[0].price == price


@pytest.mark.parametrize("markup,fraction,price", [("-10", 0.10, 1100.0), ("-25%", 0.25, 1250.0), ("(5%)", 0.05, 1050.0)])
def test_negative_markup_keeps_magnitude_and_is_reported(extract_rows, markup, fraction, price):
    result = extract_rows([
        BUDGET_HEADER,
        ['Demo', '', '$1,000.00', '', '', markup],
    ])
    item = result.items[0]
    assert item.markup_pct == pytest.approx(fraction)
    assert item.price == price
    assert _codes(result) == [WarningCode.NEGATIVE_VALUE]
    assert result.warnings[0].details['component'] == 'markup'
    assert result.warnings[0].details['raw'] == markup


def test_spacer_and_filler_rows_are_skipped_quietly(extract_rows):
    result = extract_rows([
        BUDGET_HEADER,
        ['', '', '', '', '', ''],
        ['', '', '', '', '$0.00', '30.00%'],
        ['Paint', 'Acme', '', '', '$500.00', '10%'],
    ])
    assert [i.name for i in result.items] == ['Paint']
    assert result.warnings == ()
