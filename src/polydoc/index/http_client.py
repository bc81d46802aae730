from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from polydoc.codec.codec import PolymorphicCodec
from polydoc.core.exceptions import IndexClientError
from polydoc.index.base import BaseIndexClient
from polydoc.index.types import (
    DeleteResult,
    DocId,
    GetResult,
    IndexConnection,
    IndexResult,
    LabelForHit,
    SearchResult,
)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _doc_path(index: str, doc_id: str) -> str:
    return f"/{quote(index, safe='')}/_doc/{quote(doc_id, safe='')}"


class HttpIndexClient(BaseIndexClient):
    """
    Thin client for an Elasticsearch-style document index over HTTP.

    Bodies go through the codec in both directions, so stored documents never
    carry a type discriminator. The label for reads comes from the caller.

    HTTP errors other than 404 on get/delete propagate as httpx.HTTPStatusError.
    """

    def __init__(
        self,
        connection: IndexConnection,
        codec: PolymorphicCodec,
        *,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(codec, default_index=connection.default_index)
        self.connection = connection

        self._owns_client = client is None
        if client is not None:
            self._client = client
        else:
            self._client = httpx.Client(
                base_url=connection.base_url,
                timeout=connection.timeout_seconds,
                headers=dict(connection.headers),
            )

    def index(
        self,
        document: BaseModel,
        *,
        doc_id: Optional[DocId] = None,
        index: Optional[str] = None,
    ) -> IndexResult:
        target = self._resolve_index(index)
        resolved_id = self._resolve_doc_id(document, doc_id)
        body = self.codec.encode(document)

        with self._operation("index", target, resolved_id):
            if resolved_id is None:
                resp = self._client.request("POST", f"/{quote(target, safe='')}/_doc", content=body, headers=_JSON_HEADERS)
            else:
                resp = self._client.request("PUT", _doc_path(target, resolved_id), content=body, headers=_JSON_HEADERS)
            resp.raise_for_status()
            data = self._json(resp)

        # 7.x+ reports "result"; older servers report a boolean "created"
        created = data.get("result") == "created" or data.get("created") is True
        return IndexResult(
            id=str(data.get("_id", resolved_id)),
            index=data.get("_index", target),
            created=created,
        )

    def get(self, doc_id: DocId, label: str, *, index: Optional[str] = None) -> GetResult:
        target = self._resolve_index(index)
        resolved_id = str(doc_id)

        with self._operation("get", target, resolved_id):
            resp = self._client.request("GET", _doc_path(target, resolved_id))
            if resp.status_code == 404:
                return GetResult(id=resolved_id, index=target, found=False)
            resp.raise_for_status()
            data = self._json(resp)

            if not data.get("found"):
                return GetResult(id=resolved_id, index=target, found=False)
            if "_source" not in data:
                raise IndexClientError(f"Get response without _source for id={resolved_id!r}")

            document = self.codec.decode_mapping(data["_source"], label)

        return GetResult(id=resolved_id, index=data.get("_index", target), found=True, document=document)

    def delete(self, doc_id: DocId, *, index: Optional[str] = None) -> DeleteResult:
        target = self._resolve_index(index)
        resolved_id = str(doc_id)

        with self._operation("delete", target, resolved_id):
            resp = self._client.request("DELETE", _doc_path(target, resolved_id))
            if resp.status_code == 404:
                return DeleteResult(id=resolved_id, index=target, found=False)
            resp.raise_for_status()
            data = self._json(resp)

        found = data.get("result") == "deleted" or data.get("found") is True
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
        request_body = {
            "from": from_,
            "size": size,
            "query": query if query is not None else {"match_all": {}},
        }

        with self._operation("search", target):
            resp = self._client.request("POST", f"/{quote(target, safe='')}/_search", json=request_body)
            resp.raise_for_status()
            data = self._json(resp)

            hits_block = data.get("hits")
            if not isinstance(hits_block, dict):
                raise IndexClientError(f"Search response for index={target!r} has no hits block")

            hits = hits_block.get("hits", [])
            documents = self._decode_hits(hits, label, label_for_hit)

        # 7.x+ wraps total as {"value": n, "relation": ...}
        total = hits_block.get("total", len(hits))
        if isinstance(total, dict):
            total = total.get("value", len(hits))

        self.log.debug(f"search index={target!r} total={total} returned={len(documents)}")
        return SearchResult(total=int(total), documents=documents)

    def refresh(self, index: Optional[str] = None) -> None:
        target = self._resolve_index(index)
        with self._operation("refresh", target):
            resp = self._client.request("POST", f"/{quote(target, safe='')}/_refresh")
            resp.raise_for_status()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _json(self, resp: httpx.Response) -> Dict[str, Any]:
        try:
            data: Any = resp.json()
        except ValueError as e:
            response_text = resp.text[:500]
            content_type = resp.headers.get("content-type", "unknown")
            raise IndexClientError(
                f"Failed to parse index response as JSON. "
                f"Status: {resp.status_code}, Content-Type: {content_type}. "
                f"Response preview: {response_text}"
            ) from e

        if not isinstance(data, dict):
            raise IndexClientError(f"Expected a JSON object from the index, got {type(data).__name__}")
        return data
