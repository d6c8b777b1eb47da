# tests/conftest.py
import os
import sys

import pytest

# Ensure the project root (one level up from tests/) is on sys.path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from dataclean_viz.models import CleaningResults


@pytest.fixture
def three_row_results():
    return CleaningResults.model_validate({
        "cleanedData": [{"id": 1, "val": "a"}, {"id": 3, "val": "b"}],
        "changeLog": {
            "summary": "Removed 1 row with a missing value.",
            "removedRows": [
                {"originalRow": {"id": 2, "val": ""}, "reason": "missing value in val"}
            ],
        },
    })


@pytest.fixture
def sales_rows():
    return [
        {"country": "US", "year": "2023", "sales": 10},
        {"country": "US", "year": "2022", "sales": 20},
        {"country": "DE", "year": "2023", "sales": 30},
        {"country": "FR", "year": "2023", "sales": 40},
        {"country": "US", "year": "2023", "sales": 50},
    ]


class FakeSessionState(dict):
    """Attribute access over a dict, like ``st.session_state``."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def __setattr__(self, key, value):
        self[key] = value


@pytest.fixture
def fake_st(monkeypatch):
    """Swap ``st`` in the given modules for a namespace backed by a plain dict."""
    from contextlib import nullcontext
    from types import SimpleNamespace

    from dataclean_viz.utils import history_utils

    fake = SimpleNamespace(
        session_state=FakeSessionState(action_log=[]),
        spinner=lambda *args, **kwargs: nullcontext(),
        warnings=[],
    )
    fake.warning = fake.warnings.append
    fake.info = fake.warnings.append

    def install(*modules):
        for module in (history_utils,) + modules:
            monkeypatch.setattr(module, "st", fake)
        return fake

    return install
