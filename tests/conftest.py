# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from assessa.adapters.memory_repo import InMemoryAnalysisRepository, InMemoryTaxHistoryRepository
from assessa.api.http import app, get_analysis_repo, get_history_repo
from deal_fixtures.history import delinquent_history, steady_growth_history


@pytest.fixture
def history_repo():
    return InMemoryTaxHistoryRepository(
        {
            "prop-steady": steady_growth_history(),
            "prop-delinquent": delinquent_history(),
        }
    )


@pytest.fixture
def analysis_repo():
    return InMemoryAnalysisRepository()


@pytest.fixture
def client(history_repo, analysis_repo):
    app.dependency_overrides[get_history_repo] = lambda: history_repo
    app.dependency_overrides[get_analysis_repo] = lambda: analysis_repo
    yield TestClient(app)
    app.dependency_overrides.clear()
