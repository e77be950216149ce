from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from bionicbook.exceptions import ConfigError


class MediaKind(Enum):
    EPUB = "epub"
    PDF = "pdf"
    TEXT = "text"


_EXTENSION_KINDS: dict[str, MediaKind] = {
    ".epub": MediaKind.EPUB,
    ".pdf": MediaKind.PDF,
    ".txt": MediaKind.TEXT,
    ".md": MediaKind.TEXT,
}


@dataclass(frozen=True)
class Document:
    """Payload opaco tal como lo subió el usuario. Inmutable."""
    payload: bytes
    kind: MediaKind
    name: str = "document"

    @classmethod
    def from_path(cls, path: str | Path) -> "Document":
        p = Path(path)
        kind = _EXTENSION_KINDS.get(p.suffix.lower())
        if kind is None:
            supported = ", ".join(sorted(_EXTENSION_KINDS))
            raise ConfigError(
                f"Formato no soportado: '{p.suffix}'. "
                f"Formatos disponibles: {supported}"
            )
        return cls(payload=p.read_bytes(), kind=kind, name=p.stem)

    @staticmethod
    def supported_extensions() -> list[str]:
        return sorted(_EXTENSION_KINDS)


@dataclass
class StructuredContent:
    """Lo que sale de cualquier Extractor: secciones de texto + metadata"""
    title: str
    sections: list[str] = field(default_factory=list)
    language: Optional[str] = None
