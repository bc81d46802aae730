from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from polydoc.codec.registry import TypeRegistry
from polydoc.core.exceptions import CodecError, MalformedPayload, TypeRegistryError, UnregisteredVariant
from polydoc.core.logger import get_logger

DEFAULT_DISCRIMINATOR_KEY = "$type"

logger = get_logger(__name__)


class PolymorphicCodec:
    """
    Encodes registered document variants to JSON bytes and back.

    The type label never appears in the encoded body; callers carry it
    alongside the payload and hand it back to ``decode``.

    Example:
        >>> codec = PolymorphicCodec(registry)
        >>> body = codec.encode(StudentDev(id=2, name="Name2", size=2, university="home"))
        >>> codec.decode(body, "StudentDev")
        StudentDev(id=2, name='Name2', size=2, data_encoded=None, university='home')
    """

    def __init__(
        self,
        registry: TypeRegistry,
        *,
        indent: Optional[int] = None,
        discriminator_key: str = DEFAULT_DISCRIMINATOR_KEY,
    ):
        """
        Args:
            registry: Variant registry. It is frozen here and must not change afterwards.
            indent: Pretty-print encoded bodies with this indent (compact when None).
            discriminator_key: Reserved key that older writers embedded in bodies.
                It is never emitted and is checked against the label on decode.
        """
        for label in registry.labels():
            registration = registry.get(label)
            for field in registration.fields:
                if field.wire_key == discriminator_key:
                    raise TypeRegistryError(
                        f"{registration.shape.__name__}.{field.name} uses wire key {field.wire_key!r}, "
                        f"which is reserved as the type discriminator"
                    )

        self.registry = registry.freeze()
        self.indent = indent
        self.discriminator_key = discriminator_key

    def label_for(self, document: Union[BaseModel, Type[BaseModel]]) -> str:
        shape = document if isinstance(document, type) else type(document)
        label = self.registry.label_for(shape)
        if label is None:
            raise UnregisteredVariant(shape)
        return label

    def to_mapping(self, document: BaseModel) -> Dict[str, Any]:
        """Build the wire-form JSON object for a document, without serializing it."""
        label = self.label_for(document)
        registration = self.registry.get(label)
        try:
            values = document.model_dump(mode="json")
        except ValueError as exc:
            raise CodecError(f"Cannot serialize {type(document).__name__} for label={label!r}: {exc}") from exc

        wire: Dict[str, Any] = {}
        for field in registration.fields:
            value = values.get(field.name)
            if value is None and field.omit_if_absent:
                continue
            wire[field.wire_key] = value
        return wire

    def encode(self, document: BaseModel) -> bytes:
        wire = self.to_mapping(document)
        separators = None if self.indent is not None else (",", ":")
        text = json.dumps(wire, indent=self.indent, separators=separators, ensure_ascii=False)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            # Lone surrogates survive str validation but have no UTF-8 form
            raise CodecError(f"Document {type(document).__name__} contains text that is not valid UTF-8") from exc

    def decode(self, payload: Union[bytes, str], label: str) -> BaseModel:
        # Resolve the label first so an unknown label wins over a bad body
        self.registry.get(label)

        try:
            text = payload.decode("utf-8") if isinstance(payload, (bytes, bytearray)) else payload
            parsed = json.loads(text)
        except UnicodeDecodeError as exc:
            raise MalformedPayload("Payload is not valid UTF-8", details={"label": label}) from exc
        except json.JSONDecodeError as exc:
            raise MalformedPayload(
                "Payload is not valid JSON",
                details={"label": label, "line": exc.lineno, "column": exc.colno},
            ) from exc

        return self.decode_mapping(parsed, label)

    def decode_mapping(self, payload: Mapping[str, Any], label: str) -> BaseModel:
        registration = self.registry.get(label)

        if not isinstance(payload, Mapping):
            raise MalformedPayload(
                "Payload is not a JSON object",
                details={"label": label, "json_type": type(payload).__name__},
            )

        embedded = payload.get(self.discriminator_key)
        if embedded is not None and embedded != label:
            raise MalformedPayload(
                "Embedded type discriminator does not match the requested label",
                details={"label": label, "embedded": embedded},
            )

        # Unknown members and the discriminator are dropped here
        data = {field.wire_key: payload[field.wire_key] for field in registration.fields if field.wire_key in payload}

        try:
            return registration.shape.model_validate(data)
        except ValidationError as exc:
            logger.debug(f"Decode failed for label={label!r}: {exc}")
            raise MalformedPayload(
                f"Payload does not match shape {registration.shape.__name__}",
                details={"label": label, "errors": exc.errors(include_url=False)},
            ) from exc
