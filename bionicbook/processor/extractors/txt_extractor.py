import re

from bionicbook.processor.models import Document, MediaKind, StructuredContent
from .base import BlockingExtractor


class TxtExtractor(BlockingExtractor):
    """
    Extractor para documentos de texto plano (.txt, .md).

    Las secciones son los bloques separados por línea(s) en blanco.
    El título se extrae, en orden de prioridad:
      - Primera línea si parece un título (≤10 palabras, sin punto final)
      - Nombre del documento
    """

    def can_handle(self, kind: MediaKind) -> bool:
        return kind == MediaKind.TEXT

    def parse(self, document: Document) -> StructuredContent:
        raw = self._decode(document.payload)
        return StructuredContent(
            title=self._extract_title(raw, document.name),
            sections=self._split_sections(raw),
            language=None,
        )

    # ------------------------------------------------------------------ #
    #  Helpers privados                                                    #
    # ------------------------------------------------------------------ #

    def _decode(self, payload: bytes) -> str:
        """UTF-8 primero (con o sin BOM), latin-1 como fallback."""
        try:
            return payload.decode('utf-8-sig')
        except UnicodeDecodeError:
            return payload.decode('latin-1')

    def _extract_title(self, text: str, fallback: str) -> str:
        first_line = text.strip().split('\n')[0].strip().lstrip('#').strip()
        words = first_line.split()
        if words and len(words) <= 10 and not first_line.endswith('.'):
            return first_line
        return fallback

    def _split_sections(self, text: str) -> list[str]:
        blocks = re.split(r'\n\s*\n', text.replace('\r\n', '\n'))
        return [b.strip() for b in blocks if b.strip()]
