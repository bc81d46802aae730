from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Type

from pydantic import BaseModel


@dataclass(frozen=True)
class FieldDescriptor:
    """How one model field appears on the wire."""

    name: str
    wire_key: str
    omit_if_absent: bool = True


FieldTable = Tuple[FieldDescriptor, ...]


def describe_shape(shape: Type[BaseModel], *, omit_none: bool = True) -> FieldTable:
    """Build the field table for a document shape.

    Runs once per shape at registration. Private attributes (e.g. the version
    stamp) are not model fields and never get a descriptor. A field opts out
    of absent-value omission with ``json_schema_extra={"omit_if_absent": False}``.
    """
    if not (isinstance(shape, type) and issubclass(shape, BaseModel)):
        raise TypeError(f"Document shapes must be pydantic models, got {shape!r}")

    descriptors = []
    for name, info in shape.model_fields.items():
        if info.exclude:
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        descriptors.append(
            FieldDescriptor(
                name=name,
                wire_key=info.alias or name,
                omit_if_absent=bool(extra.get("omit_if_absent", omit_none)),
            )
        )
    return tuple(descriptors)
