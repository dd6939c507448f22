"""
Budget Grid Module - Source File Reading

Exports:
- GridNormalizer: Reads CSV/TSV text and Excel workbooks into a Grid
- get_grid_normalizer(): Get singleton instance
"""

from .grid_normalizer import GridNormalizer, get_grid_normalizer

__all__ = [
    'GridNormalizer',
    'get_grid_normalizer'
]
