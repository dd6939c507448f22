"""
Budget Conversion Module - Estimate Record Conversion

Exports:
- EstimateLineItem: Persisted estimate line-item shape
- convert_to_estimate_line_items(): Enriched items -> estimate records
- summarize_import(): Category counts and totals
"""

from .estimate_converter import (
    EstimateLineItem,
    convert_line_item,
    convert_to_estimate_line_items,
    is_hourly_labor,
    summarize_import
)

__all__ = [
    'EstimateLineItem',
    'convert_line_item',
    'convert_to_estimate_line_items',
    'is_hourly_labor',
    'summarize_import'
]
