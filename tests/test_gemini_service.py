import json
from types import SimpleNamespace

import pytest
from dataclean_viz.services import gemini_service
from dataclean_viz.services.gemini_service import (
    MissingApiKeyError, MissingInstructionsError, ServiceError,
    clean_dataset, generate_chart_configs, parse_chart_response, parse_cleaning_response,
)

CLEAN_REPLY = {
    "cleanedData": [{"id": 1, "val": "a"}, {"id": 3, "val": "b"}],
    "changeLog": {
        "summary": "Removed one row.",
        "removedRows": [{"originalRow": {"id": 2, "val": ""}, "reason": "missing value in val"}],
    },
}

CHART_REPLY = [
    {"title": "Sales by region", "chartType": "bar", "dataKey": "region",
     "valueKeys": ["sales"], "description": "Totals per region"},
]


class FakeModel:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def fake_model(monkeypatch):
    def install(**kwargs):
        model = FakeModel(**kwargs)
        monkeypatch.setattr(gemini_service, "_get_model", lambda name: model)
        return model
    return install


def test_parse_cleaning_response_accepts_fenced_json():
    text = "```json\n" + json.dumps(CLEAN_REPLY) + "\n```"
    results = parse_cleaning_response(text)
    assert results.changeLog.removedRows[0].reason == "missing value in val"
    assert results.cleanedData[1] == {"id": 3, "val": "b"}


def test_parse_chart_response():
    configs = parse_chart_response(json.dumps(CHART_REPLY))
    assert configs[0].chartType == "bar"
    assert configs[0].valueKeys == ["sales"]


def test_parse_rejects_wrong_shape():
    with pytest.raises(ValueError):
        parse_cleaning_response(json.dumps({"cleanedData": []}))
    with pytest.raises(ValueError):
        parse_chart_response(json.dumps({"title": "not a list"}))


@pytest.mark.asyncio
async def test_clean_dataset_returns_results(fake_model):
    model = fake_model(text=json.dumps(CLEAN_REPLY))
    results = await clean_dataset("id,val\n1,a\n2,\n3,b\n", "drop empty rows")
    assert len(results.cleanedData) == 2
    assert "drop empty rows" in model.prompts[0]
    assert "3,b" in model.prompts[0]


@pytest.mark.asyncio
async def test_clean_dataset_wraps_bad_json(fake_model):
    fake_model(text="Sure! Here is your data")
    with pytest.raises(ServiceError, match="unexpected format"):
        await clean_dataset("a\n1\n", "clean it")


@pytest.mark.asyncio
async def test_clean_dataset_wraps_transport_errors(fake_model):
    fake_model(error=RuntimeError("quota exceeded"))
    with pytest.raises(ServiceError, match="quota exceeded"):
        await clean_dataset("a\n1\n", "clean it")


@pytest.mark.asyncio
async def test_missing_instructions_rejected_before_call(fake_model):
    model = fake_model(text=json.dumps(CLEAN_REPLY))
    with pytest.raises(MissingInstructionsError):
        await clean_dataset("a\n1\n", "   ")
    with pytest.raises(MissingInstructionsError):
        await generate_chart_configs([{"a": 1}], "")
    assert model.prompts == []


@pytest.mark.asyncio
async def test_generate_chart_configs_sends_sample(fake_model, monkeypatch):
    monkeypatch.setattr(gemini_service.settings, "DASHBOARD_SAMPLE_ROWS", 2)
    model = fake_model(text=json.dumps(CHART_REPLY))
    rows = [{"region": r, "sales": i} for i, r in enumerate(["N", "S", "E"])]

    configs = await generate_chart_configs(rows, "sales by region")

    assert configs[0].title == "Sales by region"
    assert '"S"' in model.prompts[0]
    assert '"E"' not in model.prompts[0]


@pytest.mark.asyncio
async def test_generate_chart_configs_wraps_invalid_chart_type(fake_model):
    fake_model(text=json.dumps([{**CHART_REPLY[0], "chartType": "radar"}]))
    with pytest.raises(ServiceError, match="Failed to generate dashboard"):
        await generate_chart_configs([{"region": "N", "sales": 1}], "chart it")


@pytest.mark.asyncio
async def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(gemini_service.settings, "GEMINI_API_KEY", None)
    monkeypatch.setattr(gemini_service, "_api_key", lambda: None)
    with pytest.raises(MissingApiKeyError):
        await clean_dataset("a\n1\n", "clean it")
