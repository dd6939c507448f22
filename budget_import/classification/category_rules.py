"""
Category Rules - Ordered override rules for deterministic categorisation
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..models.extraction_models import CostComponent, ExtractedLineItem, ItemCategory
from ..shared_utils.config_manager import ConfigManager
from ..shared_utils.pattern_matcher import PatternMatcher

COMPONENT_CATEGORIES = {
    CostComponent.LABOR: ItemCategory.LABOR_INTERNAL,
    CostComponent.MATERIAL: ItemCategory.MATERIALS,
    CostComponent.SUB: ItemCategory.SUBCONTRACTORS,
}


@dataclass(frozen=True)
class CategoryRule:
    """One override: when the predicate holds the item gets this category."""
    name: str
    category: ItemCategory
    predicate: Callable[[ExtractedLineItem], bool]

    def applies_to(self, item: ExtractedLineItem) -> bool:
        return self.predicate(item)


class CategoryRuleSet:
    """
    Ordered override rules evaluated before the component default.

    The first rule that applies wins. Items no rule claims fall through
    to the category of their cost component.
    """

    def __init__(self, rules: List[CategoryRule]):
        self.rules = list(rules)

    def match(self, item: ExtractedLineItem) -> Tuple[ItemCategory, Optional[str]]:
        """Category for the item and the name of the rule that set it (None for the default)."""
        for rule in self.rules:
            if rule.applies_to(item):
                return rule.category, rule.name
        return COMPONENT_CATEGORIES[item.component], None


def build_default_rules(config_manager: ConfigManager,
                        pattern_matcher: Optional[PatternMatcher] = None) -> CategoryRuleSet:
    """Management overrides: internal work at zero markup, or management wording in the name."""
    pattern_matcher = pattern_matcher or PatternMatcher()
    internal_vendor = config_manager.get_vendor_sentinel().lower()
    keywords = config_manager.get_list('management_keywords')

    def is_internal_at_cost(item: ExtractedLineItem) -> bool:
        vendor = (item.vendor_name or '').strip().lower()
        return vendor in ('', internal_vendor) and item.markup_pct == 0

    def names_management(item: ExtractedLineItem) -> bool:
        return pattern_matcher.contains_word(item.name, keywords) is not None

    return CategoryRuleSet([
        CategoryRule('internal_zero_markup', ItemCategory.MANAGEMENT, is_internal_at_cost),
        CategoryRule('management_keyword', ItemCategory.MANAGEMENT, names_management),
    ])
