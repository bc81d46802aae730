"""polydoc.

Polymorphic document codec for document-oriented search indices.

Encodes a base document type and its variants to JSON without a type
discriminator on the wire, and decodes them back using a type label the
caller carries alongside the payload.

Public API for clients indexing polymorphic documents.
"""

from polydoc.codec.codec import PolymorphicCodec
from polydoc.codec.registry import TypeRegistry, default_registry, register_variant
from polydoc.config import load_config
from polydoc.core.exceptions import (
    CodecError,
    DuplicateLabel,
    IndexClientError,
    MalformedPayload,
    PolydocException,
    TypeRegistryError,
    UnknownTypeLabel,
    UnregisteredVariant,
)
from polydoc.wiring.index_wiring import build_codec, build_index_client

__version__ = "0.1.0"

__all__ = [
    "CodecError",
    "DuplicateLabel",
    "IndexClientError",
    "MalformedPayload",
    "PolydocException",
    "PolymorphicCodec",
    "TypeRegistry",
    "TypeRegistryError",
    "UnknownTypeLabel",
    "UnregisteredVariant",
    "build_codec",
    "build_index_client",
    "default_registry",
    "load_config",
    "register_variant",
]
