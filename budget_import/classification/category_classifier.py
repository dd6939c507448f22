"""
Category Classifier - Deterministic and assistant-backed line item categorisation
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..exceptions import AssistantError
from ..models.extraction_models import EnrichedLineItem, ExtractedLineItem
from ..shared_utils.config_manager import ConfigManager
from .assistant_client import AssistantClient
from .category_rules import CategoryRuleSet, build_default_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """Enriched items in input order, and whether assistant output was adopted."""
    items: Tuple[EnrichedLineItem, ...]
    enrichment_used: bool = False


class CategoryClassifier(ABC):
    """Assigns a category to every item. Never changes item count or amounts."""

    @abstractmethod
    def classify(self, items: Iterable[ExtractedLineItem]) -> ClassificationResult:
        raise NotImplementedError


class DeterministicClassifier(CategoryClassifier):
    """Rule list first, then the item's cost component. Always confidence 1.0."""

    def __init__(self, config_manager: ConfigManager, rules: Optional[CategoryRuleSet] = None):
        self.config_manager = config_manager
        self.rules = rules or build_default_rules(config_manager)

    def classify_item(self, item: ExtractedLineItem) -> EnrichedLineItem:
        category, rule_name = self.rules.match(item)
        if rule_name:
            logger.debug(f"'{item.name}' -> {category.label} by rule {rule_name}")
        return EnrichedLineItem(
            item=item,
            category=category,
            normalized_name=item.name,
            category_confidence=1.0
        )

    def classify(self, items: Iterable[ExtractedLineItem]) -> ClassificationResult:
        return ClassificationResult(items=tuple(self.classify_item(i) for i in items))


class AssistedClassifier(CategoryClassifier):
    """
    Assistant classification with whole-batch fallback.

    The assistant may relabel and rename items. Any failure discards the
    whole reply and every item is classified deterministically.
    """

    def __init__(self, config_manager: ConfigManager, client: Optional[AssistantClient] = None,
                 fallback: Optional[DeterministicClassifier] = None):
        self.config_manager = config_manager
        self.client = client or AssistantClient(config_manager.get_assistant_settings())
        self.fallback = fallback or DeterministicClassifier(config_manager)

    def classify(self, items: Iterable[ExtractedLineItem]) -> ClassificationResult:
        items = list(items)
        if not items:
            return ClassificationResult(items=())

        try:
            replies = self.client.classify(items)
        except AssistantError as e:
            logger.warning(f"Assistant classification failed, using deterministic categories: {e}")
            return self.fallback.classify(items)

        enriched: List[EnrichedLineItem] = [
            EnrichedLineItem(
                item=item,
                category=reply.category,
                normalized_name=reply.normalizedName.strip() or item.name,
                category_confidence=reply.confidence
            )
            for item, reply in zip(items, replies)
        ]
        logger.info(f"Assistant classified {len(enriched)} items")
        return ClassificationResult(items=tuple(enriched), enrichment_used=True)


def build_classifier(config_manager: ConfigManager, use_assistant: Optional[bool] = None) -> CategoryClassifier:
    """
    Build the classifier selected by configuration.

    use_assistant overrides the configured classification.mode when given.
    """
    if use_assistant is None:
        use_assistant = config_manager.get_classification_mode() == 'assisted'
    if use_assistant:
        return AssistedClassifier(config_manager)
    return DeterministicClassifier(config_manager)
