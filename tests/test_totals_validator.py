from budget_import.extraction import TotalsValidator, compute_totals
from budget_import.models import CostComponent, ExtractedLineItem, WarningCode


def _item(cost, price):
    return ExtractedLineItem(
        source_row_index=2,
        source_item_name_raw='Demo',
        name='Demo',
        component=CostComponent.LABOR,
        vendor_name='RCG',
        cost=cost,
        markup_pct=None if price is None else price / cost - 1,
        price=price
    )


def test_price_well_below_cost_is_flagged(config_manager):
    warnings = TotalsValidator(config_manager).validate_totals([_item(100.0, 50.0), _item(100.0, 80.0)])
    assert len(warnings) == 1
    assert warnings[0].code is WarningCode.TOTAL_MISMATCH
    assert warnings[0].details == {'computed_total_cost': 200.0, 'computed_total_price': 130.0}


def test_price_near_cost_passes(config_manager):
    assert TotalsValidator(config_manager).validate_totals([_item(100.0, 95.0)]) == ()


def test_no_prices_passes(config_manager):
    assert TotalsValidator(config_manager).validate_totals([_item(100.0, None)]) == ()


def test_compute_totals_skips_missing_prices():
    assert compute_totals([_item(100.0, 125.0), _item(50.0, None)]) == (150.0, 125.0)
