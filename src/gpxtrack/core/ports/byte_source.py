from __future__ import annotations

from typing import Protocol


class ByteSourcePort(Protocol):
    def read_bytes(self, path: str) -> bytes: ...
