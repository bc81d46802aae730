from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel


DocId = Union[int, str]
LabelForHit = Callable[[Mapping[str, Any]], str]


@dataclass(frozen=True)
class IndexConnection:
    base_url: str
    timeout_seconds: float
    headers: Dict[str, str]
    default_index: Optional[str] = None


@dataclass(frozen=True)
class IndexResult:
    id: str
    index: str
    created: bool


@dataclass(frozen=True)
class GetResult:
    id: str
    index: str
    found: bool
    document: Optional[BaseModel] = None


@dataclass(frozen=True)
class DeleteResult:
    id: str
    index: str
    found: bool


@dataclass(frozen=True)
class SearchResult:
    total: int
    documents: List[BaseModel] = field(default_factory=list)
