"""
Shared Utilities Package
"""
from .config_manager import ConfigManager, AssistantSettings, get_config_manager
from .text_cleaner import TextCleaner
from .pattern_matcher import PatternMatcher
from .confidence_scorer import ConfidenceScorer
from .amount_parser import (
    ParsedAmount,
    ParsedPercent,
    parse_money,
    parse_markup,
    parse_percent,
    round2,
    is_currency_shaped
)

__all__ = [
    'ConfigManager',
    'AssistantSettings',
    'get_config_manager',
    'TextCleaner',
    'PatternMatcher',
    'ConfidenceScorer',
    'ParsedAmount',
    'ParsedPercent',
    'parse_money',
    'parse_markup',
    'parse_percent',
    'round2',
    'is_currency_shaped'
]
