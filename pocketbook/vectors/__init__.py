from .chunker import TextChunker, chunk_text  # noqa: F401
from .embeddings import (  # noqa: F401
    EmbeddingError,
    EmbeddingsClient,
    HashingProvider,
    get_embeddings_client,
    reset_embeddings_client,
)
from .ingest import (  # noqa: F401
    delete_from_knowledge_base,
    delete_from_user_store,
    ingest_to_knowledge_base,
    ingest_to_user_store,
    list_knowledge_base_docs,
    list_user_store_docs,
)
from .retrieval import (  # noqa: F401
    build_context_from_results,
    search_all,
    search_knowledge_base,
    search_user_chunks,
)
