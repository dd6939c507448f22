"""
Budget Classification Module - Line Item Categorisation

Exports:
- CategoryClassifier: Classifier interface
- DeterministicClassifier: Rule-based categories, always available
- AssistedClassifier: Assistant categories with whole-batch fallback
- build_classifier(): Classifier selected by configuration
- CategoryRuleSet / build_default_rules(): Ordered override rules
- AssistantClient: Ollama-style classification client
"""

from .category_rules import CategoryRule, CategoryRuleSet, COMPONENT_CATEGORIES, build_default_rules
from .assistant_client import AssistantClient, AssistantItem, AssistantResponse, build_request_items
from .category_classifier import (
    CategoryClassifier,
    ClassificationResult,
    DeterministicClassifier,
    AssistedClassifier,
    build_classifier
)

__all__ = [
    'CategoryRule',
    'CategoryRuleSet',
    'COMPONENT_CATEGORIES',
    'build_default_rules',
    'AssistantClient',
    'AssistantItem',
    'AssistantResponse',
    'build_request_items',
    'CategoryClassifier',
    'ClassificationResult',
    'DeterministicClassifier',
    'AssistedClassifier',
    'build_classifier'
]
