"""
Totals Validator - Sanity check of aggregate cost against aggregate price
"""
import logging
from typing import Iterable, Tuple

from ..models.extraction_models import ExtractedLineItem, ImportWarning, WarningCode
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.amount_parser import round2

logger = logging.getLogger(__name__)


def compute_totals(items: Iterable[ExtractedLineItem]) -> Tuple[float, float]:
    """Sum cost and price over items. Items without a price add nothing to the price total."""
    total_cost = 0.0
    total_price = 0.0
    for item in items:
        total_cost += item.cost
        if item.price is not None:
            total_price += item.price
    return round2(total_cost), round2(total_price)


class TotalsValidator:
    """Flags imports whose total price falls well below total cost."""

    def __init__(self, config_manager: ConfigManager):
        self.config_manager = config_manager
        self.ratio = config_manager.get_threshold('price_to_cost_ratio')

    def validate_totals(self, items: Iterable[ExtractedLineItem]) -> Tuple[ImportWarning, ...]:
        total_cost, total_price = compute_totals(items)

        if 0 < total_price < total_cost * self.ratio:
            logger.warning(f"Total price {total_price:,.2f} is below {self.ratio:.0%} of total cost {total_cost:,.2f}")
            return (ImportWarning(
                code=WarningCode.TOTAL_MISMATCH,
                message=f'Total price (${total_price:,.2f}) is less than total cost (${total_cost:,.2f})',
                details={'computed_total_cost': total_cost, 'computed_total_price': total_price}
            ),)
        return ()
