"""
Estimate Converter - Maps enriched line items onto estimate line-item records
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.extraction_models import (
    CostComponent,
    EnrichedLineItem,
    ImportSummary,
    ItemCategory
)
from ..shared_utils.amount_parser import round2

HOURLY_UNIT = 'HR'
LUMP_SUM_UNIT = 'LS'


@dataclass(frozen=True)
class EstimateLineItem:
    """Record shape handed to the persistence layer."""
    description: str
    category: str
    quantity: float
    unit: str
    cost_per_unit: float
    price_per_unit: float
    markup_percent: float
    total: float
    total_cost: float
    total_markup: float
    labor_hours: Optional[float] = None
    billing_rate_per_hour: Optional[float] = None
    actual_cost_rate_per_hour: Optional[float] = None
    labor_cushion_amount: Optional[float] = None
    notes: Optional[str] = None
    source_row_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _select(items: Sequence[EnrichedLineItem], selected_indices: Optional[Iterable[int]]) -> List[EnrichedLineItem]:
    if selected_indices is None:
        return list(items)
    wanted = set(selected_indices)
    return [item for i, item in enumerate(items) if i in wanted]


def is_hourly_labor(item: EnrichedLineItem) -> bool:
    return item.component is CostComponent.LABOR and bool(item.labor_hours) and item.labor_hours > 0


def convert_line_item(item: EnrichedLineItem) -> EstimateLineItem:
    """
    Convert one item.

    Internal labor with hours becomes hours at the billing rate; everything
    else is one lump sum. Amounts are read from the item, never re-derived
    from source cells.
    """
    hourly = is_hourly_labor(item)
    quantity = item.labor_hours if hourly else 1.0
    unit = HOURLY_UNIT if hourly else LUMP_SUM_UNIT

    if hourly and item.billing_rate_per_hour:
        cost_per_unit = item.billing_rate_per_hour
    else:
        cost_per_unit = item.cost / quantity
    price = item.price if item.price is not None else item.cost
    price_per_unit = price / quantity

    total_cost = round2(quantity * cost_per_unit)
    total = round2(quantity * price_per_unit)

    return EstimateLineItem(
        description=item.normalized_name or item.name,
        category=item.category.value,
        quantity=quantity,
        unit=unit,
        cost_per_unit=cost_per_unit,
        price_per_unit=price_per_unit,
        markup_percent=item.markup_pct * 100 if item.markup_pct is not None else 0.0,
        total=total,
        total_cost=total_cost,
        total_markup=round2(total - total_cost),
        labor_hours=item.labor_hours if hourly else None,
        billing_rate_per_hour=item.billing_rate_per_hour if hourly else None,
        actual_cost_rate_per_hour=item.actual_cost_rate_per_hour if hourly else None,
        labor_cushion_amount=item.labor_cushion_amount if hourly else None,
        notes=f"Split from: {item.item.split_from_name}" if item.item.was_split else None,
        source_row_index=item.item.source_row_index
    )


def convert_to_estimate_line_items(items: Sequence[EnrichedLineItem],
                                   selected_indices: Optional[Iterable[int]] = None) -> List[EstimateLineItem]:
    """Convert the selected items (all when no selection is given), keeping their order."""
    return [convert_line_item(item) for item in _select(items, selected_indices)]


def summarize_import(items: Sequence[EnrichedLineItem],
                     selected_indices: Optional[Iterable[int]] = None) -> ImportSummary:
    """Category counts and totals for a review screen."""
    chosen = _select(items, selected_indices)
    counts = {category: 0 for category in ItemCategory}
    for item in chosen:
        counts[item.category] += 1

    return ImportSummary(
        total_line_items=len(chosen),
        total_cost=round2(sum(i.cost for i in chosen)),
        total_price=round2(sum(i.price or 0.0 for i in chosen)),
        labor_items_count=counts[ItemCategory.LABOR_INTERNAL],
        subcontractor_items_count=counts[ItemCategory.SUBCONTRACTORS],
        materials_items_count=counts[ItemCategory.MATERIALS],
        management_items_count=counts[ItemCategory.MANAGEMENT],
        total_labor_hours=round2(sum(i.labor_hours or 0.0 for i in chosen)),
        estimated_labor_cushion=round2(sum(i.labor_cushion_amount or 0.0 for i in chosen))
    )
