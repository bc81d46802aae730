from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

from polydoc.codec.codec import PolymorphicCodec
from polydoc.core.exceptions import IndexClientError
from polydoc.index.base import BaseIndexClient
from polydoc.index.types import DeleteResult, DocId, GetResult, IndexResult, LabelForHit, SearchResult


class InMemoryIndexClient(BaseIndexClient):
    """Index client that keeps encoded bodies in a dict keyed by (index, id).

    Stored values are exactly the bytes the codec produced, so tests can
    inspect the wire form. Search supports match_all only.
    """

    def __init__(self, codec: PolymorphicCodec, *, default_index: Optional[str] = None):
        super().__init__(codec, default_index=default_index)
        self._data: Dict[Tuple[str, str], bytes] = {}

    def index(
        self,
        document: BaseModel,
        *,
        doc_id: Optional[DocId] = None,
        index: Optional[str] = None,
    ) -> IndexResult:
        target = self._resolve_index(index)
        resolved_id = self._resolve_doc_id(document, doc_id) or uuid.uuid4().hex
        body = self.codec.encode(document)

        with self._operation("index", target, resolved_id):
            key = (target, resolved_id)
            created = key not in self._data
            self._data[key] = body

        return IndexResult(id=resolved_id, index=target, created=created)

    def get(self, doc_id: DocId, label: str, *, index: Optional[str] = None) -> GetResult:
        target = self._resolve_index(index)
        resolved_id = str(doc_id)

        with self._operation("get", target, resolved_id):
            body = self._data.get((target, resolved_id))
            if body is None:
                return GetResult(id=resolved_id, index=target, found=False)
            document = self.codec.decode(body, label)

        return GetResult(id=resolved_id, index=target, found=True, document=document)

    def delete(self, doc_id: DocId, *, index: Optional[str] = None) -> DeleteResult:
        target = self._resolve_index(index)
        resolved_id = str(doc_id)

        with self._operation("delete", target, resolved_id):
            found = self._data.pop((target, resolved_id), None) is not None

        return DeleteResult(id=resolved_id, index=target, found=found)

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
        target = self._resolve_index(index)
        if query is not None and set(query) != {"match_all"}:
            raise IndexClientError("InMemoryIndexClient only supports match_all queries")

        with self._operation("search", target):
            hits = [
                {"_index": idx, "_id": doc_id, "_source": json.loads(body)}
                for (idx, doc_id), body in self._data.items()
                if idx == target
            ]
            page = hits[from_:from_ + size]
            documents = self._decode_hits(page, label, label_for_hit)

        return SearchResult(total=len(hits), documents=documents)

    def raw(self, doc_id: DocId, *, index: Optional[str] = None) -> Optional[bytes]:
        """Return the stored body exactly as written."""
        return self._data.get((self._resolve_index(index), str(doc_id)))
