import pytest

from pocketbook.vectors import (
    HashingProvider,
    TextChunker,
    build_context_from_results,
    ingest_to_knowledge_base,
    ingest_to_user_store,
    search_knowledge_base,
)

from .conftest import bearer

CPF_NOTE = "CPF contributions are shared between employer and employee every month."
RENT_NOTE = "Rent for the flat is paid to the landlord on the first of the month."


@pytest.fixture
def kb(app):
    ingest_to_knowledge_base("cpf-guide", CPF_NOTE, metadata={"title": "CPF basics"})


def _search(client, headers=None, **body):
    return client.post("/api/vectors/search", json=body, headers=headers or {})


# chunking

def test_short_paragraphs_merge_into_one_chunk():
    chunks = TextChunker().chunk("First paragraph.\n\nSecond paragraph.")
    assert len(chunks) == 1
    assert chunks[0]["content"] == "First paragraph.\n\nSecond paragraph."
    assert chunks[0]["metadata"]["total_chunks"] == 1


def test_paragraphs_split_when_too_long():
    text = "a" * 20 + "\n\n" + "b" * 20
    chunks = TextChunker(max_chunk_size=30, overlap=5, base_metadata={"doc_id": "d"}).chunk(text)
    assert [c["content"] for c in chunks] == ["a" * 20, "b" * 20]
    second = chunks[1]["metadata"]
    assert second == {"doc_id": "d", "chunk_index": 1, "total_chunks": 2, "start_char": 22, "end_char": 42}


def test_fixed_chunks_overlap_on_word_boundaries():
    text = " ".join(f"w{i:02d}" for i in range(40))
    chunks = [c["content"] for c in TextChunker(max_chunk_size=40, overlap=8, strategy="fixed").chunk(text)]
    assert len(chunks) > 1
    assert all(len(c) <= 40 for c in chunks)
    assert chunks[0].endswith("w09")
    assert "w09" in chunks[1]
    assert chunks[-1].endswith("w39")


def test_chunker_rejects_bad_config():
    with pytest.raises(ValueError):
        TextChunker(strategy="words")
    with pytest.raises(ValueError):
        TextChunker(max_chunk_size=10, overlap=10)


def test_hashing_embeddings_are_normalised():
    provider = HashingProvider(dimensions=64)
    vec = provider.embed_query("budget shift")
    assert len(vec) == 64
    assert pytest.approx(sum(v * v for v in vec)) == 1.0
    assert provider.embed_query("") == [0.0] * 64


def test_build_context_formats_and_truncates():
    results = [
        {"doc_id": "a", "chunk_index": 0, "content": "alpha", "metadata": {"k": 1}},
        {"doc_id": "b", "chunk_index": 2, "content": "beta" * 50, "metadata": {}},
    ]
    assert build_context_from_results(results) == (
        "[Source: a, Chunk 1]\nalpha\n\n---\n\n[Source: b, Chunk 3]\n" + "beta" * 50
    )
    assert build_context_from_results(results, max_length=30) == "[Source: a, Chunk 1]\nalpha"
    assert 'Metadata: {"k": 1}' in build_context_from_results(results[:1], include_metadata=True)


# search over the stores

def test_knowledge_base_search_ranks_exact_match(kb):
    ingest_to_knowledge_base("rent", RENT_NOTE)
    results = search_knowledge_base(CPF_NOTE, min_similarity=0.5)
    assert results[0]["doc_id"] == "cpf-guide"
    assert results[0]["similarity"] == pytest.approx(1.0)
    assert results[0]["metadata"]["title"] == "CPF basics"


def test_reingesting_replaces_chunks(kb):
    assert ingest_to_knowledge_base("cpf-guide", RENT_NOTE)["chunks_created"] == 1
    assert search_knowledge_base(CPF_NOTE, min_similarity=0.99) == []


# the HTTP endpoint

def test_search_requires_query(client):
    assert _search(client, source="kb").status_code == 400
    assert _search(client, source="kb", query=42).status_code == 400
    assert _search(client, query="x", source="elsewhere").status_code == 400


def test_user_sources_require_identity(client):
    resp = _search(client, query="rent", source="user")
    assert resp.status_code == 401
    assert "Authentication required" in resp.get_json()["error"]
    assert _search(client, query="rent").status_code == 401


def test_bad_token_is_rejected(client):
    resp = _search(client, {"Authorization": "Bearer not-a-jwt"}, query="rent", source="kb")
    assert resp.status_code == 401


def test_anonymous_knowledge_base_search(client, kb):
    resp = _search(client, query=CPF_NOTE, source="kb", buildContext=True)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["query"] == CPF_NOTE
    assert body["source"] == "kb"
    assert [r["doc_id"] for r in body["results"]] == ["cpf-guide"]
    assert body["context"].startswith("[Source: cpf-guide, Chunk 1]")


def test_no_context_without_results(client, kb):
    body = _search(client, query="zebra xylophone", source="kb", buildContext=True).get_json()
    assert body["results"] == []
    assert "context" not in body


def test_user_documents_stay_private(client, user, other_user, kb):
    ingest_to_user_store(user.id, "rent-notes", RENT_NOTE)

    mine = _search(client, bearer(user), query=RENT_NOTE, source="all").get_json()["results"]
    assert [(r["doc_id"], r["source"]) for r in mine] == [("rent-notes", "user")]

    theirs = _search(client, bearer(other_user), query=RENT_NOTE, source="user").get_json()
    assert theirs["results"] == []


def test_search_failure_is_a_generic_500(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("provider down")

    monkeypatch.setattr("pocketbook.routes.vectors.search_knowledge_base", boom)
    resp = _search(client, query="anything", source="kb")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to perform search"}


def test_upload_and_list_private_documents(client, user):
    headers = bearer(user)
    resp = client.post("/api/vectors/documents", json={"docId": "notes", "content": RENT_NOTE}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json() == {"doc_id": "notes", "chunks_created": 1}

    docs = client.get("/api/vectors/documents", headers=headers).get_json()["documents"]
    assert [(d["doc_id"], d["chunk_count"]) for d in docs] == [("notes", 1)]

    assert client.post("/api/vectors/documents", json={"docId": "x"}, headers=headers).status_code == 400
    assert client.get("/api/vectors/documents").status_code == 401
