import json

import pytest
import requests

from budget_import.classification import (
    AssistedClassifier,
    AssistantClient,
    DeterministicClassifier,
    build_classifier,
    build_request_items
)
from budget_import.classification import assistant_client
from budget_import.models import CostComponent, ExtractedLineItem, ItemCategory, RawCells
from budget_import.shared_utils import ConfigManager


def _item(name, component, vendor='RCG', cost=1000.0, markup=0.25):
    return ExtractedLineItem(
        source_row_index=2,
        source_item_name_raw=name,
        name=name,
        component=component,
        vendor_name=vendor,
        cost=cost,
        markup_pct=markup,
        price=None if markup is None else round(cost * (1 + markup), 2),
        raw=RawCells(labor_cell='$24,970.00')
    )


ITEMS = [
    _item('Demo', CostComponent.LABOR),
    _item('Demo - Materials', CostComponent.MATERIAL),
    _item('Ceilings', CostComponent.SUB, vendor='Cincinnati Interiors'),
]


class FakeResponse:
    def __init__(self, text):
        self.text = text

    def raise_for_status(self):
        pass

    def json(self):
        return {'response': self.text}


class BodyResponse(FakeResponse):
    def __init__(self, body):
        self.body = body

    def json(self):
        return self.body


def _reply(entries):
    return FakeResponse(json.dumps({'items': entries}))


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def install(result):
        def fake_post(url, json=None, timeout=None):
            calls.append({'url': url, 'json': json, 'timeout': timeout})
            if isinstance(result, Exception):
                raise result
            return result
        monkeypatch.setattr(assistant_client.requests, 'post', fake_post)
        return calls

    return install


def test_categories_follow_cost_component(config_manager):
    result = DeterministicClassifier(config_manager).classify(ITEMS)
    assert [i.category for i in result.items] == [
        ItemCategory.LABOR_INTERNAL, ItemCategory.MATERIALS, ItemCategory.SUBCONTRACTORS
    ]
    assert all(i.category_confidence == 1.0 for i in result.items)
    assert [i.normalized_name for i in result.items] == ['Demo', 'Demo - Materials', 'Ceilings']
    assert result.enrichment_used is False


def test_internal_work_at_zero_markup_is_management(config_manager):
    item = _item('Supervision', CostComponent.LABOR, markup=0.0, cost=3000.0)
    enriched = DeterministicClassifier(config_manager).classify_item(item)
    assert enriched.category is ItemCategory.MANAGEMENT
    assert enriched.cost == 3000.0
    assert enriched.price == 3000.0


def test_management_wording_is_management(config_manager):
    classifier = DeterministicClassifier(config_manager)
    assert classifier.classify_item(
        _item('Project Manager', CostComponent.SUB, vendor='Acme PM')).category is ItemCategory.MANAGEMENT
    assert classifier.classify_item(
        _item('PM fee', CostComponent.LABOR)).category is ItemCategory.MANAGEMENT


def test_short_keyword_needs_a_word_boundary(config_manager):
    item = _item('Equipment rental', CostComponent.LABOR)
    assert DeterministicClassifier(config_manager).classify_item(item).category is ItemCategory.LABOR_INTERNAL


def test_missing_markup_is_not_zero_markup(config_manager):
    item = _item('Demo', CostComponent.LABOR, markup=None)
    assert DeterministicClassifier(config_manager).classify_item(item).category is ItemCategory.LABOR_INTERNAL


def test_request_carries_only_summary_fields():
    payload = build_request_items(ITEMS)
    assert all(set(entry) == {'name', 'component', 'vendor', 'cost', 'markup'} for entry in payload)
    assert payload[2] == {
        'name': 'Ceilings', 'component': 'sub', 'vendor': 'Cincinnati Interiors', 'cost': 1000.0, 'markup': 0.25
    }


def test_assisted_results_are_adopted(config_manager, captured):
    calls = captured(_reply([
        {'category': 'labor_internal', 'normalizedName': 'Demolition', 'confidence': 0.9},
        {'category': 'materials', 'normalizedName': 'Demolition Materials', 'confidence': 0.8},
        {'category': 'subcontractors', 'normalizedName': 'Acoustic Ceilings', 'confidence': 0.95},
    ]))
    result = AssistedClassifier(config_manager).classify(ITEMS)

    assert result.enrichment_used is True
    assert [i.normalized_name for i in result.items] == ['Demolition', 'Demolition Materials', 'Acoustic Ceilings']
    assert [i.category_confidence for i in result.items] == [0.9, 0.8, 0.95]
    assert [(i.name, i.cost, i.price) for i in result.items] == [(i.name, i.cost, i.price) for i in ITEMS]

    request = calls[0]
    assert request['url'] == 'http://localhost:11434/api/generate'
    assert request['timeout'] == 20.0
    assert request['json']['stream'] is False
    assert '$24,970.00' not in request['json']['prompt']
    assert 'source_row_index' not in request['json']['prompt']


def test_assistant_reply_wrapped_in_prose_is_repaired(config_manager, captured):
    captured(FakeResponse(
        "Here you go:\n```json\n{\"items\": [{\"category\": \"materials\", \"normalizedName\": \"Demo\","
        " \"confidence\": 0.7},]}\n```"
    ))
    items = AssistantClient(config_manager.get_assistant_settings()).classify(ITEMS[:1])
    assert items[0].category is ItemCategory.MATERIALS


@pytest.mark.parametrize("response", [
    _reply([{'category': 'materials', 'normalizedName': 'Demo', 'confidence': 0.9}]),
    _reply([
        {'category': 'plumbing', 'normalizedName': 'Demo', 'confidence': 0.9},
        {'category': 'materials', 'normalizedName': 'Demo', 'confidence': 0.9},
        {'category': 'materials', 'normalizedName': 'Demo', 'confidence': 0.9},
    ]),
    FakeResponse('no json here'),
    BodyResponse(['not', 'a', 'dict']),
    BodyResponse({'response': {'items': []}}),
    requests.Timeout('timed out'),
    requests.ConnectionError('refused'),
])
def test_any_assistant_failure_falls_back_for_the_whole_batch(config_manager, captured, response):
    captured(response)
    assisted = AssistedClassifier(config_manager).classify(ITEMS)
    deterministic = DeterministicClassifier(config_manager).classify(ITEMS)

    assert assisted == deterministic
    assert assisted.enrichment_used is False


def test_empty_batch_skips_the_assistant(config_manager, captured):
    calls = captured(requests.ConnectionError('should not be called'))
    result = AssistedClassifier(config_manager).classify([])
    assert result.items == ()
    assert calls == []


def test_build_classifier_follows_configuration():
    assisted = ConfigManager(overrides={'classification': {'mode': 'assisted'}})
    assert isinstance(build_classifier(assisted), AssistedClassifier)
    assert isinstance(build_classifier(assisted, use_assistant=False), DeterministicClassifier)
    assert isinstance(build_classifier(ConfigManager()), DeterministicClassifier)
    assert isinstance(build_classifier(ConfigManager(), use_assistant=True), AssistedClassifier)


def test_categories_have_display_labels():
    assert [c.label for c in ItemCategory] == ['Labor (Internal)', 'Materials', 'Subcontractor', 'Management']
