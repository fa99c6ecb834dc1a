from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union


@dataclass(frozen=True)
class StartElement:
    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EndElement:
    name: str


@dataclass(frozen=True)
class Text:
    content: str


XmlEvent = Union[StartElement, EndElement, Text]


def local_name(name: str) -> str:
    """`{http://www.topografix.com/GPX/1/1}trkpt` -> `trkpt`."""
    if name.startswith("{"):
        return name.rpartition("}")[2]
    return name.rpartition(":")[2]
