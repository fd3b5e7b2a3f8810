"""
Tests for the search endpoints.

Uses a real orchestrator over in-memory collaborators injected through
dependency overrides.

System role: Verification of search HTTP contracts and error mapping
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from edu_rag.api.deps import get_search_service
from edu_rag.api.main import create_app
from edu_rag.application.services.search_service import SearchService
from edu_rag.configs.search import SearchSettings
from edu_rag.core.search.multi_language import MultiLanguageSearchOrchestrator
from edu_rag.core.search.vector_search import VectorSearchEngine

QUERY = "How do plants turn sunlight into chemical energy?"


@pytest.fixture
def chunks(make_chunk):
    return [
        make_chunk([1.0, 0.0, 0.0, 0.0], content="Plants convert sunlight into chemical energy"),
        make_chunk([0.0, 1.0, 0.0, 0.0], content="Volcanoes erupt molten rock"),
    ]


@pytest.fixture
def build_client(codec, chunks, chunk_store_factory, embeddings_factory):
    def _build(delay: float = 0.0, timeout: float = 1.0):
        settings = SearchSettings(timeout_seconds=timeout)
        store = chunk_store_factory(chunks, delay=delay)
        orchestrator = MultiLanguageSearchOrchestrator(
            VectorSearchEngine(store, codec, settings),
            embeddings_factory(),
            store,
            settings=settings,
        )
        app = create_app()
        app.dependency_overrides[get_search_service] = lambda: SearchService(orchestrator)
        return TestClient(app)

    return _build


def test_search_returns_ranked_results(build_client):
    client = build_client()

    response = client.post("/api/v1/search", json={"query": QUERY, "options": {"min_similarity": 0.5}})

    assert response.status_code == 200
    body = response.json()
    assert body["total_results"] == 1
    assert body["detected_language"] == "en"
    assert body["search_type"] == "vector"
    result = body["results"][0]
    assert result["similarity"] == pytest.approx(1.0)
    assert "<mark>" in result["highlighted_content"]
    assert "created_at" not in result


def test_hybrid_search(build_client):
    client = build_client()
    payload = {
        "query": QUERY,
        "options": {"hybrid": True, "vector_weight": 0.6, "keyword_weight": 0.4, "min_similarity": 0.1},
    }

    response = client.post("/api/v1/search", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["search_type"] == "hybrid"
    assert body["results"][0]["keyword_score"] == 1.0


def test_invalid_weights_map_to_422(build_client):
    client = build_client()
    payload = {"query": QUERY, "options": {"hybrid": True, "vector_weight": 0.9, "keyword_weight": 0.9}}

    response = client.post("/api/v1/search", json=payload)

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_WEIGHTS"


def test_short_query_is_rejected(build_client):
    client = build_client()

    response = client.post("/api/v1/search", json={"query": "hi"})

    assert response.status_code == 422


def test_storage_timeout_maps_to_504(build_client):
    client = build_client(delay=0.5, timeout=0.05)

    response = client.post("/api/v1/search", json={"query": QUERY})

    assert response.status_code == 504
    assert response.json()["retryable"] is True


def test_cross_language_without_translator(build_client):
    client = build_client()
    payload = {"query": QUERY, "source_language": "en", "target_languages": ["en", "ko"], "options": {"min_similarity": 0.5}}

    response = client.post("/api/v1/search/cross-language", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["search_type"] == "cross_language"
    assert [b["language"] for b in body["language_breakdown"]] == ["en"]


def test_language_suggestions(build_client):
    client = build_client()

    response = client.get("/api/v1/search/languages/suggest", params={"query": QUERY})

    assert response.status_code == 200
    assert response.json()["suggestions"][0] == "en"


def test_batch_search_keeps_query_order(build_client):
    client = build_client()
    payload = {"queries": [QUERY, "Why do volcanoes erupt molten rock?"], "options": {"min_similarity": 0.5}}

    response = client.post("/api/v1/search/batch", json=payload)

    assert response.status_code == 200
    responses = response.json()["responses"]
    assert len(responses) == 2
    assert responses[0]["results"][0]["content"].startswith("Plants")


def test_empty_batch_is_rejected(build_client):
    client = build_client()

    response = client.post("/api/v1/search/batch", json={"queries": []})

    assert response.status_code == 422


def test_similar_chunks(build_client, chunks):
    client = build_client()

    default = client.post(f"/api/v1/search/similar/{chunks[0].chunk_id}")
    relaxed = client.post(f"/api/v1/search/similar/{chunks[0].chunk_id}", json={"min_similarity": 0.0})

    assert default.status_code == 200
    assert default.json()["total_results"] == 0
    assert default.json()["search_type"] == "similar"
    assert [r["chunk_id"] for r in relaxed.json()["results"]] == [str(chunks[1].chunk_id)]


def test_similar_to_unknown_chunk_maps_to_404(build_client):
    client = build_client()

    response = client.post(f"/api/v1/search/similar/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "CHUNK_NOT_FOUND"


def test_language_distribution(build_client):
    client = build_client()

    response = client.get("/api/v1/search/languages/distribution")

    assert response.status_code == 200
    [english] = response.json()
    assert english["language"] == "en"
    assert english["document_count"] == 2
    assert english["percentage"] == pytest.approx(100.0)
