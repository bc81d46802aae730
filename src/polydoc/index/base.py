from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from pydantic import BaseModel

from polydoc.codec.codec import PolymorphicCodec
from polydoc.core.exceptions import IndexClientError
from polydoc.core.logger import get_logger, push_op_id, reset_op_id
from polydoc.index.types import DeleteResult, DocId, GetResult, IndexResult, LabelForHit, SearchResult


class BaseIndexClient(ABC):
    """Shared plumbing for index clients: index name resolution, ids, hit decoding."""

    def __init__(self, codec: PolymorphicCodec, *, default_index: Optional[str] = None):
        self.codec = codec
        self.default_index = default_index
        self.log = get_logger(self.__class__.__name__)

    # --- Required methods ---
    @abstractmethod
    def index(
        self,
        document: BaseModel,
        *,
        doc_id: Optional[DocId] = None,
        index: Optional[str] = None,
    ) -> IndexResult:
        raise NotImplementedError

    @abstractmethod
    def get(self, doc_id: DocId, label: str, *, index: Optional[str] = None) -> GetResult:
        raise NotImplementedError

    @abstractmethod
    def delete(self, doc_id: DocId, *, index: Optional[str] = None) -> DeleteResult:
        raise NotImplementedError

    @abstractmethod
    def search(
        self,
        label: str,
        *,
        index: Optional[str] = None,
        from_: int = 0,
        size: int = 10,
        query: Optional[Dict[str, Any]] = None,
        label_for_hit: Optional[LabelForHit] = None,
    ) -> SearchResult:
        raise NotImplementedError

    # --- Optional hooks ---
    def refresh(self, index: Optional[str] = None) -> None:
        """Make recent writes visible to search. No-op unless the backend needs it."""
        return None

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore
        self.close()
        return False

    # --- Helpers ---
    def _resolve_index(self, index: Optional[str]) -> str:
        target = index or self.default_index
        if not target:
            raise IndexClientError("No index given and no default_index configured")
        return target

    @staticmethod
    def _resolve_doc_id(document: BaseModel, doc_id: Optional[DocId]) -> Optional[str]:
        if doc_id is None:
            doc_id = getattr(document, "id", None)
        return None if doc_id is None else str(doc_id)

    def _decode_hits(
        self,
        hits: Iterable[Mapping[str, Any]],
        label: str,
        label_for_hit: Optional[LabelForHit],
    ) -> List[BaseModel]:
        documents: List[BaseModel] = []
        for hit in hits:
            if "_source" not in hit:
                raise IndexClientError(f"Search hit without _source: id={hit.get('_id')!r}")
            hit_label = label_for_hit(hit) if label_for_hit is not None else label
            documents.append(self.codec.decode_mapping(hit["_source"], hit_label))
        return documents

    @contextmanager
    def _operation(self, op: str, index: str, doc_id: Optional[str] = None) -> Iterator[str]:
        op_id = f"{op}-{uuid.uuid4().hex[:8]}"
        token = push_op_id(op_id)
        try:
            self.log.debug(f"{op} index={index!r} id={doc_id!r}")
            yield op_id
        finally:
            reset_op_id(token)
