import json

import yaml

from budget_import.shared_utils import ConfigManager, get_config_manager


def test_defaults(config_manager):
    assert config_manager.get_threshold('empty_run_length') == 3
    assert config_manager.get_vendor_sentinel() == 'RCG'
    assert config_manager.get_labor_rates() == {'billing_rate': 75.0, 'actual_rate': 35.0}
    assert config_manager.get_classification_mode() == 'deterministic'
    assert 'total cost' in config_manager.get_stop_markers()
    assert config_manager.get_header_weight('item') == 5
    assert config_manager.get_header_weight('total_with_markup') == 1


def test_yaml_file_is_merged_over_defaults(tmp_path):
    path = tmp_path / 'budget_import.yaml'
    path.write_text(yaml.safe_dump({
        'thresholds': {'empty_run_length': 2},
        'labor_rates': {'billing_rate': 90.0},
        'internal_vendor': 'ACME'
    }))
    config = ConfigManager(path)

    assert config.get_threshold('empty_run_length') == 2
    assert config.get_threshold('max_header_rows') == 60
    assert config.get_labor_rates() == {'billing_rate': 90.0, 'actual_rate': 35.0}
    assert config.get_vendor_sentinel() == 'ACME'


def test_json_file_is_read(tmp_path):
    path = tmp_path / 'budget_import.json'
    path.write_text(json.dumps({'classification': {'mode': 'assisted'}}))
    config = ConfigManager(str(path))

    assert config.get_classification_mode() == 'assisted'
    assert config.get_assistant_settings().model == 'llama3'


def test_unreadable_config_falls_back_to_defaults(tmp_path):
    assert ConfigManager(tmp_path / 'missing.yaml').get_threshold('empty_run_length') == 3

    listing = tmp_path / 'list.yaml'
    listing.write_text('- just\n- a list\n')
    assert ConfigManager(listing).get_vendor_sentinel() == 'RCG'


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / 'budget_import.yaml'
    path.write_text('thresholds:\n  min_header_score: 10\n')
    monkeypatch.setenv('BUDGET_IMPORT_CONFIG', str(path))

    assert ConfigManager().get_threshold('min_header_score') == 10


def test_assistant_settings_from_environment(monkeypatch):
    monkeypatch.setenv('BUDGET_IMPORT_ASSISTANT_URL', 'http://assistant:8080/')
    monkeypatch.setenv('BUDGET_IMPORT_ASSISTANT_MODEL', 'mistral')
    monkeypatch.setenv('BUDGET_IMPORT_ASSISTANT_TIMEOUT', '5')
    settings = ConfigManager().get_assistant_settings()

    assert settings.url == 'http://assistant:8080'
    assert settings.model == 'mistral'
    assert settings.timeout == 5.0


def test_bad_timeout_is_ignored(monkeypatch):
    monkeypatch.setenv('BUDGET_IMPORT_ASSISTANT_TIMEOUT', 'soon')
    assert ConfigManager().get_assistant_settings().timeout == 20.0


def test_overrides_do_not_leak_into_defaults():
    tuned = ConfigManager(overrides={'thresholds': {'empty_run_length': 5}})
    assert tuned.get_threshold('empty_run_length') == 5
    assert tuned.get_threshold('zero_tolerance') == 0.005
    assert ConfigManager().get_threshold('empty_run_length') == 3


def test_shared_config_manager_is_reused():
    assert get_config_manager() is get_config_manager()
