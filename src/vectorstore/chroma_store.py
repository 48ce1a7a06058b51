"""ChromaDB vector index for portfolio page chunks."""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from src.errors import IndexBackendError
from src.models.chunk import IndexedVector
from src.models.query import ChunkMatch, RetrievalResult
from src.vectorstore.base import VectorIndex

logger = logging.getLogger(__name__)

COLLECTION_NAME = "portfolio_chunks"
DELETE_BATCH_SIZE = 5000


class ChromaStore(VectorIndex):
    """ChromaDB-backed vector index.

    Manages a single collection with cosine distance. Each record stores the
    chunk text as the Chroma document plus url/text/chunk_index metadata.

    path=":memory:" uses an in-process ephemeral client; a host uses
    chromadb.HttpClient; anything else is a local persistent directory.
    """

    def __init__(
        self,
        path: str = "./data/chroma",
        collection_name: str = COLLECTION_NAME,
        host: str = "",
        port: int = 8000,
        dimension: int = 768,
        metadata_text_limit: int = 500,
    ):
        super().__init__(dimension=dimension, metadata_text_limit=metadata_text_limit)
        self.collection_name = collection_name
        try:
            if host:
                self._client = chromadb.HttpClient(host=host, port=port)
            elif path == ":memory:":
                self._client = chromadb.Client()
            else:
                self._client = chromadb.PersistentClient(
                    path=path,
                    settings=ChromaSettings(anonymized_telemetry=False),
                )
            self._collection = self._get_or_create_collection()
        except Exception as e:
            raise IndexBackendError(f"Failed to open Chroma collection {collection_name}: {e}") from e

    def _get_or_create_collection(self):
        return self._client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def _upsert(self, vectors: list[IndexedVector]) -> None:
        ids = []
        embeddings = []
        documents = []
        metadatas = []

        for vector in vectors:
            metadata = dict(vector.metadata)
            text = metadata.get("text", "")
            metadata["text"] = text[: self.metadata_text_limit]
            ids.append(vector.id)
            embeddings.append(vector.values)
            documents.append(vector.document if vector.document is not None else text)
            metadatas.append(metadata)

        try:
            self._collection.upsert(
                ids=ids,
                embeddings=embeddings,
                documents=documents,
                metadatas=metadatas,
            )
        except Exception as e:
            raise IndexBackendError(f"Chroma upsert failed: {e}") from e
        logger.debug("Upserted %d vectors into %s", len(ids), self.collection_name)

    def _query(self, vector: list[float], top_k: int) -> RetrievalResult:
        try:
            results = self._collection.query(
                query_embeddings=[vector],
                n_results=top_k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise IndexBackendError(f"Chroma query failed: {e}") from e

        matches = []
        ids = (results.get("ids") or [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        for i, vector_id in enumerate(ids):
            metadata = (metas[i] if i < len(metas) else None) or {}
            text = (docs[i] if i < len(docs) else None) or metadata.get("text", "")
            distance = distances[i] if i < len(distances) else 1.0
            matches.append(ChunkMatch(
                id=vector_id,
                text=text,
                # Cosine distance -> cosine similarity
                score=1.0 - distance,
                metadata=metadata,
            ))
        return RetrievalResult(matches=matches)

    def _delete_all(self) -> None:
        # Records are deleted in place; the collection keeps its ID, so other
        # handles on the same collection stay valid across a clear.
        try:
            ids = self._collection.get(include=[])["ids"]
            for start in range(0, len(ids), DELETE_BATCH_SIZE):
                self._collection.delete(ids=ids[start:start + DELETE_BATCH_SIZE])
        except Exception as e:
            raise IndexBackendError(f"Chroma clear failed: {e}") from e
        logger.info("Cleared %d vectors from %s", len(ids), self.collection_name)

    def get_source_chunks(self, source_url: str) -> list[dict]:
        """Retrieve all stored chunks for a source URL, in chunk order."""
        try:
            results = self._collection.get(where={"url": source_url})
        except Exception as e:
            raise IndexBackendError(f"Chroma get failed: {e}") from e
        output = []
        for i in range(len(results["ids"])):
            output.append({
                "id": results["ids"][i],
                "text": results["documents"][i] if results["documents"] else "",
                "metadata": results["metadatas"][i] if results["metadatas"] else {},
            })
        return sorted(output, key=lambda c: c["metadata"].get("chunk_index", 0))

    @property
    def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as e:
            raise IndexBackendError(f"Chroma count failed: {e}") from e


def build_chroma_store(settings, config) -> ChromaStore:
    """Open the Chroma collection described by settings, sized by config."""
    return ChromaStore(
        path=str(settings.chroma_path),
        collection_name=settings.portfolio_chroma_collection,
        host=settings.portfolio_chroma_host,
        port=settings.portfolio_chroma_port,
        dimension=config.embedding_dimension,
        metadata_text_limit=config.metadata_text_limit,
    )
