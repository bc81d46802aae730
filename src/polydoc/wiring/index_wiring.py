from __future__ import annotations

import base64
from typing import Dict, Optional

import httpx

from polydoc.bootstrap import load_builtin_documents
from polydoc.codec.codec import PolymorphicCodec
from polydoc.codec.registry import TypeRegistry, default_registry
from polydoc.core.logger import configure_root_logger
from polydoc.index.http_client import HttpIndexClient
from polydoc.index.memory import InMemoryIndexClient
from polydoc.index.types import IndexConnection
from polydoc.models.config import (
    CodecConfig,
    IndexAuthApiKeyConfig,
    IndexAuthBasicConfig,
    IndexAuthConfig,
    IndexClientConfig,
    PolydocConfig,
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _auth_headers(auth: IndexAuthConfig) -> Dict[str, str]:
    if isinstance(auth, IndexAuthBasicConfig):
        credential = _b64(f"{auth.username}:{auth.password.get_secret_value()}")
        return {"Authorization": f"Basic {credential}"}

    if isinstance(auth, IndexAuthApiKeyConfig):
        if auth.encoded is not None:
            credential = auth.encoded.get_secret_value()
        else:
            credential = _b64(f"{auth.id}:{auth.api_key.get_secret_value()}")
        return {"Authorization": f"ApiKey {credential}"}

    return {}


def build_index_connection(cfg: IndexClientConfig) -> IndexConnection:
    # This wiring module is the only layer allowed to read Pydantic config.
    headers = dict(cfg.headers)
    headers.update(_auth_headers(cfg.auth))
    return IndexConnection(
        base_url=cfg.base_url,
        timeout_seconds=float(cfg.timeout_seconds),
        headers=headers,
        default_index=cfg.default_index,
    )


def build_codec(
    cfg: Optional[CodecConfig] = None,
    *,
    registry: Optional[TypeRegistry] = None,
) -> PolymorphicCodec:
    """Build a codec over a private, frozen copy of the given (or default) registry."""
    cfg = cfg or CodecConfig()
    if registry is None:
        load_builtin_documents()
        registry = default_registry

    return PolymorphicCodec(
        registry.copy(omit_none=cfg.omit_none),
        indent=cfg.indent,
        discriminator_key=cfg.discriminator_key,
    )


def build_index_client(
    cfg: PolydocConfig,
    *,
    registry: Optional[TypeRegistry] = None,
    client: Optional[httpx.Client] = None,
) -> HttpIndexClient:
    if cfg.index is None:
        raise ValueError("Config has no 'index' section; cannot build an index client")

    configure_root_logger(cfg.log_level)
    codec = build_codec(cfg.codec, registry=registry)
    connection = build_index_connection(cfg.index)
    return HttpIndexClient(connection, codec, client=client)


def build_memory_client(
    cfg: PolydocConfig,
    *,
    registry: Optional[TypeRegistry] = None,
) -> InMemoryIndexClient:
    configure_root_logger(cfg.log_level)
    codec = build_codec(cfg.codec, registry=registry)
    default_index = cfg.index.default_index if cfg.index is not None else None
    return InMemoryIndexClient(codec, default_index=default_index)
