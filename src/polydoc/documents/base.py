from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic.alias_generators import to_camel


class DocumentFields(BaseModel):
    """Field set shared by every document variant.

    Variants subclass this directly and never each other, so each label maps
    to exactly one flat shape. ``version`` is stamped at construction and is
    neither read from nor written to the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[int] = None
    name: str
    size: int = 0
    data_encoded: Optional[str] = None

    _version: int = PrivateAttr(default=1)

    @property
    def version(self) -> int:
        return self._version
