from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Type, TypeVar

from pydantic import BaseModel

from polydoc.codec.fields import FieldTable, describe_shape
from polydoc.core.exceptions import DuplicateLabel, TypeRegistryError, UnknownTypeLabel
from polydoc.core.logger import get_logger

logger = get_logger(__name__)

ShapeT = TypeVar("ShapeT", bound=Type[BaseModel])


@dataclass(frozen=True)
class VariantRegistration:
    label: str
    shape: Type[BaseModel]
    fields: FieldTable


class TypeRegistry:
    """Label -> document shape mapping used to resolve variants.

    Writes happen during setup only. Once frozen the registry is read-only
    and lookups need no locking.
    """

    def __init__(self, *, omit_none: bool = True):
        self._omit_none = omit_none
        self._by_label: Dict[str, VariantRegistration] = {}
        self._by_shape: Dict[Type[BaseModel], str] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, label: str, shape: Type[BaseModel]) -> VariantRegistration:
        if not label:
            raise TypeRegistryError("Variant label must be a non-empty string")

        with self._lock:
            if self._frozen:
                raise TypeRegistryError(f"Registry is frozen, cannot register label={label!r}")

            existing = self._by_label.get(label)
            if existing is not None:
                if existing.shape is shape:
                    return existing
                raise DuplicateLabel(label, existing.shape, shape)

            other_label = self._by_shape.get(shape)
            if other_label is not None:
                raise TypeRegistryError(
                    f"{shape.__name__} is already registered under label={other_label!r}, cannot add label={label!r}"
                )

            registration = VariantRegistration(
                label=label,
                shape=shape,
                fields=describe_shape(shape, omit_none=self._omit_none),
            )
            self._by_label[label] = registration
            self._by_shape[shape] = label

        logger.info(f"Registered document variant label={label!r} shape={shape.__name__}")
        return registration

    def get(self, label: str) -> VariantRegistration:
        try:
            return self._by_label[label]
        except KeyError as exc:
            raise UnknownTypeLabel(label) from exc

    def try_get(self, label: str) -> Optional[VariantRegistration]:
        return self._by_label.get(label)

    def label_for(self, shape: Type[BaseModel]) -> Optional[str]:
        return self._by_shape.get(shape)

    def freeze(self) -> "TypeRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self, *, omit_none: Optional[bool] = None) -> "TypeRegistry":
        """Return an unfrozen registry with the same labels.

        Field tables are rebuilt so a different ``omit_none`` default applies.
        """
        clone = TypeRegistry(omit_none=self._omit_none if omit_none is None else omit_none)
        for registration in self._by_label.values():
            clone.register(registration.label, registration.shape)
        return clone

    def clear(self) -> None:
        with self._lock:
            self._by_label.clear()
            self._by_shape.clear()
            self._frozen = False

    def labels(self) -> Iterator[str]:
        return iter(tuple(self._by_label))

    def __contains__(self, label: object) -> bool:
        return label in self._by_label

    def __len__(self) -> int:
        return len(self._by_label)


# Built-in document modules register here at import time
default_registry = TypeRegistry()


def register_variant(
    *,
    label: str,
    registry: Optional[TypeRegistry] = None,
) -> Callable[[ShapeT], ShapeT]:
    def decorator(shape: ShapeT) -> ShapeT:
        target = registry if registry is not None else default_registry
        target.register(label, shape)
        return shape

    return decorator
