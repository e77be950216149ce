# chunker/chunker.py
import re

from bionicbook.exceptions import ConfigError
from .models import Chunk, build_chunks

# Punto/exclamación/interrogación, posiblemente repetidos ("?!", "...")
_SENTENCE_END_RE = re.compile(r'[.!?]+')

_JOINER = " "


def split_sentences(text: str) -> list[str]:
    """Oraciones recortadas, sin los terminadores y sin fragmentos vacíos."""
    return [s.strip() for s in _SENTENCE_END_RE.split(text) if s.strip()]


def split_text(text: str, max_chunk_chars: int) -> list[str]:
    """
    Agrupa oraciones de forma voraz en chunks de hasta max_chunk_chars.

    Una oración que sola supera el límite forma su propio chunk:
    nunca se trunca contenido.
    """
    if max_chunk_chars < 1:
        raise ConfigError(f"max_chunk_chars debe ser >= 1: {max_chunk_chars}")

    chunks: list[str] = []
    buffer = ""

    for fragment in _SENTENCE_END_RE.split(text):
        sentence = fragment.strip()
        if not sentence:
            continue

        # El espacio que precede a la oración cuenta como un único separador,
        # sea un espacio o varios saltos de párrafo.
        leading = 1 if fragment[:1].isspace() else 0
        candidate_len = len(buffer) + len(_JOINER) + leading + len(sentence)
        if buffer and candidate_len > max_chunk_chars:
            chunks.append(buffer)
            buffer = sentence
        else:
            buffer = f"{buffer}{_JOINER}{sentence}" if buffer else sentence

    if buffer:
        chunks.append(buffer)

    return chunks


class TextChunker:

    def __init__(self, max_chunk_chars: int = 1000):
        if max_chunk_chars < 1:
            raise ConfigError(f"max_chunk_chars debe ser >= 1: {max_chunk_chars}")
        self._max_chunk_chars = max_chunk_chars

    @property
    def max_chunk_chars(self) -> int:
        return self._max_chunk_chars

    def split(self, text: str, max_chunk_chars: int | None = None) -> list[str]:
        limit = self._max_chunk_chars if max_chunk_chars is None else max_chunk_chars
        return split_text(text, limit)

    def chunk(self, text: str, max_chunk_chars: int | None = None) -> list[Chunk]:
        return build_chunks(self.split(text, max_chunk_chars))
