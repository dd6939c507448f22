"""
Extraction Models - Data classes for grids, mappings, line items and results
"""
from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple


class CanonicalColumn(Enum):
    """Semantic roles a header cell can be mapped to."""
    ITEM = "item"
    VENDOR = "vendor"
    LABOR = "labor"
    MATERIAL = "material"
    SUB = "sub"
    MARKUP = "markup"
    TOTAL = "total"
    TOTAL_WITH_MARKUP = "total_with_markup"


COST_COLUMNS = (CanonicalColumn.LABOR, CanonicalColumn.MATERIAL, CanonicalColumn.SUB)


class CostComponent(Enum):
    """Cost component carried by every extracted line item."""
    LABOR = "labor"
    MATERIAL = "material"
    SUB = "sub"


class ItemCategory(Enum):
    """Business category assigned by the classifier."""
    LABOR_INTERNAL = "labor_internal"
    MATERIALS = "materials"
    SUBCONTRACTORS = "subcontractors"
    MANAGEMENT = "management"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ItemCategory.LABOR_INTERNAL: "Labor (Internal)",
    ItemCategory.MATERIALS: "Materials",
    ItemCategory.SUBCONTRACTORS: "Subcontractor",
    ItemCategory.MANAGEMENT: "Management",
}


class WarningCode(Enum):
    """Diagnostic codes surfaced with every import."""
    HEADER_NOT_FOUND = "HEADER_NOT_FOUND"
    COLUMN_MISSING = "COLUMN_MISSING"
    COLUMN_AMBIGUOUS = "COLUMN_AMBIGUOUS"
    LOW_CONFIDENCE_MAPPING = "LOW_CONFIDENCE_MAPPING"
    STOP_MARKER_FOUND = "STOP_MARKER_FOUND"
    STOP_BY_STRUCTURE = "STOP_BY_STRUCTURE"
    SKIPPED_SUMMARY_ROW = "SKIPPED_SUMMARY_ROW"
    SKIPPED_EMPTY_ROW = "SKIPPED_EMPTY_ROW"
    MARKUP_MISSING = "MARKUP_MISSING"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    UNPARSEABLE_CURRENCY = "UNPARSEABLE_CURRENCY"
    UNPARSEABLE_PERCENT = "UNPARSEABLE_PERCENT"
    NEGATIVE_VALUE = "NEGATIVE_VALUE"


@dataclass(frozen=True)
class Grid:
    """Rectangular, immutable table of text cells."""
    rows: Tuple[Tuple[str, ...], ...]

    @classmethod
    def from_rows(cls, rows: List[List[Any]]) -> "Grid":
        """Pad ragged rows to the widest row. Cells are kept as text."""
        width = max((len(r) for r in rows), default=0)
        padded = []
        for row in rows:
            cells = ["" if c is None else str(c).strip() for c in row]
            cells.extend([""] * (width - len(cells)))
            padded.append(tuple(cells))
        return cls(rows=tuple(padded))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def cell(self, row_index: int, col_index: Optional[int]) -> str:
        if col_index is None or col_index < 0 or col_index >= self.col_count:
            return ""
        return self.rows[row_index][col_index]


@dataclass(frozen=True)
class ImportWarning:
    """Coded diagnostic. Returned, never raised."""
    code: WarningCode
    message: str
    row_index: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code.value,
            'message': self.message,
            'row_index': self.row_index,
            'details': dict(self.details)
        }


@dataclass(frozen=True)
class HeaderCandidate:
    """Scored header row candidate."""
    row_index: int
    score: int
    matched_headers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ColumnMapping:
    """Partial map from grid column index to canonical column."""
    columns: Dict[int, CanonicalColumn]
    header_row_index: int
    confidence: float
    unmapped_headers: Tuple[str, ...] = ()
    warnings: Tuple[ImportWarning, ...] = ()

    def index_of(self, canonical: CanonicalColumn) -> Optional[int]:
        for col_index, mapped in self.columns.items():
            if mapped is canonical:
                return col_index
        return None

    @property
    def has_item_column(self) -> bool:
        return self.index_of(CanonicalColumn.ITEM) is not None

    @property
    def has_cost_column(self) -> bool:
        return any(self.index_of(c) is not None for c in COST_COLUMNS)


@dataclass(frozen=True)
class TableRegion:
    """Line-item table bounds: start inclusive, end exclusive."""
    start_row: int
    end_row: int
    stop_reason: Optional[str] = None
    stop_marker: Optional[str] = None
    warnings: Tuple[ImportWarning, ...] = ()


@dataclass(frozen=True)
class RawCells:
    """Trimmed source cell text a line item was built from."""
    vendor_cell: Optional[str] = None
    labor_cell: Optional[str] = None
    material_cell: Optional[str] = None
    sub_cell: Optional[str] = None
    markup_cell: Optional[str] = None
    total_with_markup_cell: Optional[str] = None


@dataclass(frozen=True)
class ExtractedLineItem:
    """A deterministic cost line item traceable to its source row."""
    source_row_index: int
    source_item_name_raw: str
    name: str
    component: CostComponent
    vendor_name: Optional[str]
    cost: float
    markup_pct: Optional[float]
    price: Optional[float]
    was_split: bool = False
    split_from_name: Optional[str] = None
    raw: RawCells = field(default_factory=RawCells)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['component'] = self.component.value
        return data


@dataclass(frozen=True)
class EnrichedLineItem:
    """Extracted line item plus classification. Amounts are never recomputed."""
    item: ExtractedLineItem
    category: ItemCategory
    normalized_name: str
    category_confidence: float
    labor_hours: Optional[float] = None
    billing_rate_per_hour: Optional[float] = None
    actual_cost_rate_per_hour: Optional[float] = None
    labor_cushion_amount: Optional[float] = None

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def component(self) -> CostComponent:
        return self.item.component

    @property
    def vendor_name(self) -> Optional[str]:
        return self.item.vendor_name

    @property
    def cost(self) -> float:
        return self.item.cost

    @property
    def price(self) -> Optional[float]:
        return self.item.price

    @property
    def markup_pct(self) -> Optional[float]:
        return self.item.markup_pct

    def with_labor_rates(self, billing_rate: float, actual_rate: float) -> "EnrichedLineItem":
        hours = self.item.cost / billing_rate if billing_rate > 0 else 0.0
        return replace(
            self,
            labor_hours=hours,
            billing_rate_per_hour=billing_rate,
            actual_cost_rate_per_hour=actual_rate,
            labor_cushion_amount=hours * (billing_rate - actual_rate)
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data.update({
            'category': self.category.value,
            'normalized_name': self.normalized_name,
            'category_confidence': self.category_confidence,
            'labor_hours': self.labor_hours,
            'billing_rate_per_hour': self.billing_rate_per_hour,
            'actual_cost_rate_per_hour': self.actual_cost_rate_per_hour,
            'labor_cushion_amount': self.labor_cushion_amount
        })
        return data


@dataclass(frozen=True)
class ExtractionMetadata:
    """Run statistics attached to every extraction result."""
    header_row_index: int = -1
    stop_row_index: Optional[int] = None
    stop_reason: Optional[str] = None
    rows_scanned: int = 0
    rows_extracted: int = 0
    compound_rows_split: int = 0
    mapping_confidence: float = 0.0
    total_cost: float = 0.0
    total_price: float = 0.0


@dataclass(frozen=True)
class ExtractionResult:
    """Deterministic extraction output (stages 2-6)."""
    success: bool
    items: Tuple[ExtractedLineItem, ...]
    warnings: Tuple[ImportWarning, ...]
    metadata: ExtractionMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'items': [i.to_dict() for i in self.items],
            'warnings': [w.to_dict() for w in self.warnings],
            'metadata': asdict(self.metadata)
        }


@dataclass(frozen=True)
class ImportResult:
    """Final import output: extraction plus classification."""
    success: bool
    items: Tuple[EnrichedLineItem, ...]
    warnings: Tuple[ImportWarning, ...]
    metadata: ExtractionMetadata
    enrichment_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        metadata = asdict(self.metadata)
        metadata['enrichment_used'] = self.enrichment_used
        return {
            'success': self.success,
            'items': [i.to_dict() for i in self.items],
            'warnings': [w.to_dict() for w in self.warnings],
            'metadata': metadata
        }


@dataclass(frozen=True)
class ImportSummary:
    """Per-category roll-up of an import, for review screens."""
    total_line_items: int
    total_cost: float
    total_price: float
    labor_items_count: int
    subcontractor_items_count: int
    materials_items_count: int
    management_items_count: int
    total_labor_hours: float
    estimated_labor_cushion: float
