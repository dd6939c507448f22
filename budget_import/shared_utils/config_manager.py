"""
Configuration Manager - Handles config loading and management
"""
import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'BUDGET_IMPORT_CONFIG'


@dataclass
class AssistantSettings:
    """Connection settings for the optional classification assistant."""
    enabled: bool = False
    url: str = "http://localhost:11434"
    model: str = "llama3"
    timeout: float = 20.0
    endpoint: str = "/api/generate"


DEFAULT_CONFIG: Dict[str, Any] = {
    'header_synonyms': {
        'item': ['item', 'items', 'scope', 'description', 'desc', 'line item', 'task', 'work item'],
        'vendor': ['subcontractor', 'sub contractor', 'vendor', 'trade', 'company', 'contractor'],
        'labor': ['labor', 'labour', 'labor cost', 'labor $', 'labor amt', 'labor amount', 'labor total'],
        'material': ['material', 'materials', 'mat', 'material cost', 'material $', 'mat cost'],
        'sub': ['sub', 'subs', 'sub cost', 'sub $', 'sub amount', 'subcontract', 'subcontract cost', 'sub total'],
        'markup': ['markup', 'mark up', 'mu', 'margin %', 'markup %', 'mark-up'],
        'total': ['total', 'cost total', 'total cost', 'ext', 'extended'],
        'total_with_markup': ['total with mark up', 'total w markup', 'total w/ mark up', 'sell',
                              'price', 'sell price', 'total price'],
        'profit': ['profit', 'margin $', 'gross profit', 'gp']
    },
    'header_weights': {
        'item': 5,
        'labor': 3,
        'material': 3,
        'sub': 3,
        'markup': 3,
        'total': 3,
        'vendor': 2,
        'default': 1,
        'fuzzy': 2,
        'data_row_penalty': 3
    },
    'stop_markers': [
        'expenses', 'expense tracking', 'expense log',
        'rcg labor', 'labor tracking', 'timecard', 'payroll',
        'subcontractor expenses', 'sub expenses', 'reconciliation',
        'total cost', 'total contract', 'total job proposal',
        'construction contract', 'terms and conditions',
        'signature', 'hereby', 'contingency'
    ],
    'summary_indicators': ['total', 'subtotal', 'summary', 'grand total'],
    'management_keywords': ['supervision', 'management', 'pm', 'project manager'],
    'internal_vendor': 'RCG',
    'thresholds': {
        'max_header_rows': 60,
        'min_header_score': 8,
        'max_currency_cells_in_header': 3,
        'fuzzy_min_length': 5,
        'fuzzy_max_distance': 2,
        'mapping_accept': 0.6,
        'substring_cap': 0.9,
        'fuzzy_cap': 0.8,
        'low_confidence_mapping': 0.7,
        'max_unmapped_headers': 3,
        'empty_run_length': 3,
        'zero_tolerance': 0.005,
        'price_to_cost_ratio': 0.9
    },
    'confidence_penalties': {
        'missing_item': 0.4,
        'missing_cost': 0.4,
        'missing_markup': 0.1,
        'too_many_unmapped': 0.1
    },
    'labor_rates': {
        'billing_rate': 75.0,
        'actual_rate': 35.0
    },
    'classification': {
        'mode': 'deterministic',
        'assistant': {
            'enabled': False,
            'url': 'http://localhost:11434',
            'model': 'llama3',
            'timeout': 20.0,
            'endpoint': '/api/generate'
        }
    }
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manages configuration loading and vocabulary lookups."""

    def __init__(self, config_path=None, overrides: Optional[Dict[str, Any]] = None):
        if config_path is None:
            config_path = os.getenv(CONFIG_ENV_VAR)

        self.config_path = Path(config_path) if config_path else None
        self.config = self.load_configuration()
        if overrides:
            self.config = _deep_merge(self.config, overrides)
        self._apply_env_overrides()

    def load_configuration(self) -> Dict[str, Any]:
        """Load configuration from a JSON or YAML file merged over the defaults."""
        if self.config_path is None:
            return self._get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                if self.config_path.suffix.lower() in ('.yaml', '.yml'):
                    loaded = yaml.safe_load(f) or {}
                else:
                    loaded = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config from {self.config_path}: {e}")
            return self._get_default_config()

        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring config {self.config_path}: top level is not a mapping")
            return self._get_default_config()

        logger.info(f"Loaded budget import config from {self.config_path}")
        return _deep_merge(DEFAULT_CONFIG, loaded)

    def _get_default_config(self) -> Dict[str, Any]:
        """Provide default configuration if config file is not available."""
        return copy.deepcopy(DEFAULT_CONFIG)

    def _apply_env_overrides(self):
        assistant = self.config['classification']['assistant']
        url = os.getenv('BUDGET_IMPORT_ASSISTANT_URL')
        if url:
            assistant['url'] = url
        model = os.getenv('BUDGET_IMPORT_ASSISTANT_MODEL')
        if model:
            assistant['model'] = model
        timeout = os.getenv('BUDGET_IMPORT_ASSISTANT_TIMEOUT')
        if timeout:
            try:
                assistant['timeout'] = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring non-numeric BUDGET_IMPORT_ASSISTANT_TIMEOUT={timeout!r}")

    def get_synonyms(self) -> Dict[str, List[str]]:
        """Get header synonyms keyed by canonical column name."""
        return self.config.get('header_synonyms', {})

    def get_header_weight(self, canonical: str) -> int:
        weights = self.config.get('header_weights', {})
        return weights.get(canonical, weights.get('default', 1))

    def get_stop_markers(self) -> List[str]:
        return self.get_list('stop_markers')

    def get_list(self, key: str) -> List[str]:
        """Get a vocabulary list by key."""
        return list(self.config.get(key, []))

    def get_threshold(self, key: str):
        return self.config['thresholds'][key]

    def get_penalty(self, key: str) -> float:
        return self.config['confidence_penalties'][key]

    def get_vendor_sentinel(self) -> str:
        return self.config.get('internal_vendor', 'RCG')

    def get_labor_rates(self) -> Dict[str, float]:
        return dict(self.config['labor_rates'])

    def get_classification_mode(self) -> str:
        return self.config.get('classification', {}).get('mode', 'deterministic')

    def get_assistant_settings(self) -> AssistantSettings:
        raw = self.config.get('classification', {}).get('assistant', {})
        return AssistantSettings(
            enabled=bool(raw.get('enabled', False)),
            url=str(raw.get('url', AssistantSettings.url)).rstrip('/'),
            model=str(raw.get('model', AssistantSettings.model)),
            timeout=float(raw.get('timeout', AssistantSettings.timeout)),
            endpoint=str(raw.get('endpoint', AssistantSettings.endpoint))
        )


# Singleton instance
_config_manager_instance = None


def get_config_manager() -> ConfigManager:
    """Get singleton ConfigManager instance."""
    global _config_manager_instance
    if _config_manager_instance is None:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance
