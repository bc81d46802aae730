from __future__ import annotations

from typing import Optional

from polydoc.codec.registry import register_variant
from polydoc.documents.base import DocumentFields


@register_variant(label="Student")
class Student(DocumentFields):
    pass


@register_variant(label="StudentDev")
class StudentDev(DocumentFields):
    """Student document that also records the owning university."""

    university: Optional[str] = None
