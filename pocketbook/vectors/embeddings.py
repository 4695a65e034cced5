"""Embedding providers behind one client.

``voyage`` and ``openai`` call the vendors' HTTP APIs. ``hashing`` is a local
bag-of-words feature hasher with no network access, used in development and
tests.
"""
import hashlib
import logging
import re
import threading

import numpy as np
import requests
from flask import current_app

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


class EmbeddingError(RuntimeError):
    pass


class EmbeddingProvider:
    name = "base"
    dimensions = 0

    def embed_batch(self, texts):
        raise NotImplementedError

    def embed_query(self, text):
        return self.embed_batch([text])[0]


class _HTTPProvider(EmbeddingProvider):
    url = None

    def __init__(self, api_key, model, timeout=30):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        })

    def _post(self, payload):
        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise EmbeddingError(f"{self.name} request failed: {e}") from e
        if not resp.ok:
            raise EmbeddingError(f"{self.name} API error: {resp.status_code} - {resp.text}")
        data = resp.json()["data"]
        return [item["embedding"] for item in sorted(data, key=lambda d: d.get("index", 0))]


class VoyageAIProvider(_HTTPProvider):
    name = "voyage-ai"
    dimensions = 512
    url = "https://api.voyageai.com/v1/embeddings"

    def __init__(self, api_key, model=None, timeout=30):
        super().__init__(api_key, model or "voyage-3-lite", timeout)

    def embed_batch(self, texts):
        return self._post({"model": self.model, "input": texts, "input_type": "document"})

    def embed_query(self, text):
        return self._post({"model": self.model, "input": [text], "input_type": "query"})[0]


class OpenAIProvider(_HTTPProvider):
    name = "openai"
    dimensions = 1536
    url = "https://api.openai.com/v1/embeddings"

    def __init__(self, api_key, model=None, timeout=30):
        super().__init__(api_key, model or "text-embedding-3-small", timeout)

    def embed_batch(self, texts):
        return self._post({"model": self.model, "input": texts})


class HashingProvider(EmbeddingProvider):
    name = "hashing"

    def __init__(self, dimensions=256):
        self.dimensions = dimensions

    def _vector(self, text):
        vec = np.zeros(self.dimensions, dtype=np.float64)
        for token in re.findall(r"[a-z0-9]+", (text or "").lower()):
            digest = hashlib.md5(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "little") % self.dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vec[bucket] += sign
        norm = np.linalg.norm(vec)
        return (vec / norm if norm else vec).tolist()

    def embed_batch(self, texts):
        return [self._vector(t) for t in texts]


class EmbeddingsClient:
    def __init__(self, provider):
        self.provider = provider

    @property
    def name(self):
        return self.provider.name

    @property
    def dimensions(self):
        return self.provider.dimensions

    def embed(self, text):
        return self.provider.embed_batch([text])[0]

    def embed_batch(self, texts):
        results = []
        for i in range(0, len(texts), BATCH_SIZE):
            results.extend(self.provider.embed_batch(texts[i:i + BATCH_SIZE]))
        return results

    def embed_query(self, text):
        return self.provider.embed_query(text)


def build_provider(config):
    kind = (config.get("EMBEDDINGS_PROVIDER") or "").lower()
    model = config.get("EMBEDDINGS_MODEL")
    timeout = config.get("EMBEDDINGS_TIMEOUT", 30)
    if not kind:
        # prefer Voyage when both keys are present
        if config.get("VOYAGE_API_KEY"):
            kind = "voyage"
        elif config.get("OPENAI_API_KEY"):
            kind = "openai"
        else:
            raise EmbeddingError("No embedding API key found. Set either VOYAGE_API_KEY or OPENAI_API_KEY.")

    if kind == "voyage":
        if not config.get("VOYAGE_API_KEY"):
            raise EmbeddingError("VOYAGE_API_KEY is not set")
        return VoyageAIProvider(config["VOYAGE_API_KEY"], model, timeout)
    if kind == "openai":
        if not config.get("OPENAI_API_KEY"):
            raise EmbeddingError("OPENAI_API_KEY is not set")
        return OpenAIProvider(config["OPENAI_API_KEY"], model, timeout)
    if kind == "hashing":
        return HashingProvider()
    raise EmbeddingError(f"Unknown embeddings provider {kind!r}")


_client = None
_client_lock = threading.Lock()


def get_embeddings_client():
    global _client
    with _client_lock:
        if _client is None:
            _client = EmbeddingsClient(build_provider(current_app.config))
            logger.info("Embeddings provider: %s", _client.name)
        return _client


def reset_embeddings_client():
    global _client
    with _client_lock:
        _client = None
