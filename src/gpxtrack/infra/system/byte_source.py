from __future__ import annotations

import logging
import mmap

from gpxtrack.core.ports.byte_source import ByteSourcePort
from gpxtrack.domain.errors import IoOrFormatError


logger = logging.getLogger(__name__)


class OSByteSource(ByteSourcePort):
    """Lit un fichier en le projetant en mémoire."""

    def read_bytes(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                # mmap refuse les fichiers vides
                with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
                    return mapped[:]
        except (OSError, ValueError) as e:
            logger.debug("projection mémoire impossible pour %s: %s", path, e)
            raise IoOrFormatError(f"impossible de lire {path}: {e}") from e
