import os
import re
import tempfile
from html import unescape

from bionicbook.processor.models import Document, MediaKind, StructuredContent
from .base import BlockingExtractor

_BLOCK_TAGS_RE = re.compile(
    r'<(p|br|div|h[1-6]|li|tr|blockquote)[^>]*>',
    re.IGNORECASE,
)
_HEAD_RE = re.compile(r'<head[^>]*>.*?</head>', re.IGNORECASE | re.DOTALL)


class EpubExtractor(BlockingExtractor):
    """
    Extractor para documentos .epub.

    Estrategia de sección:
      - Cada documento XHTML del EPUB = una sección (así lo estructura el autor).
      - Se limpia el HTML de cada ítem dejando solo texto plano.
      - Ítems sin texto (portadas de solo imagen) se descartan.

    Dependencia: ebooklib  →  pip install ebooklib
    La importación es lazy para no romper el resto del sistema si no está
    instalada y el usuario solo trabaja con TXT.
    """

    def can_handle(self, kind: MediaKind) -> bool:
        return kind == MediaKind.EPUB

    def parse(self, document: Document) -> StructuredContent:
        try:
            from ebooklib import epub
        except ImportError:
            raise ImportError(
                "ebooklib no está instalado. "
                "Ejecuta: pip install ebooklib"
            )

        # ebooklib solo lee desde disco
        fd, tmp_path = tempfile.mkstemp(suffix=".epub")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(document.payload)
            book = epub.read_epub(tmp_path, options={'ignore_ncx': True})
        finally:
            os.remove(tmp_path)

        return StructuredContent(
            title=self._extract_title(book, document.name),
            sections=self._extract_sections(book),
            language=self._extract_language(book),
        )

    # ------------------------------------------------------------------ #
    #  Helpers privados                                                    #
    # ------------------------------------------------------------------ #

    def _extract_title(self, book, fallback: str) -> str:
        titles = book.get_metadata('DC', 'title')
        if titles and str(titles[0][0]).strip():
            return str(titles[0][0]).strip()
        return fallback

    def _extract_language(self, book) -> str | None:
        langs = book.get_metadata('DC', 'language')
        if langs:
            return str(langs[0][0]).strip().lower()
        return None

    def _extract_sections(self, book) -> list[str]:
        import ebooklib

        sections: list[str] = []

        for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT):
            # La navegación generada no es contenido del libro
            if item.get_name().endswith("nav.xhtml"):
                continue

            text = html_to_text(item.get_content())
            if text:
                sections.append(text)

        return sections


def html_to_text(html_bytes: bytes) -> str:
    """
    Convierte HTML de un capítulo EPUB a texto plano limpio.
    Cada bloque (<p>, <h1>...) queda como un párrafo separado por línea en blanco.
    """
    try:
        html = html_bytes.decode('utf-8')
    except UnicodeDecodeError:
        html = html_bytes.decode('latin-1')

    html = _HEAD_RE.sub('', html)

    # Convertir etiquetas de bloque en saltos de párrafo antes de limpiar
    html = _BLOCK_TAGS_RE.sub('\n\n', html)

    # Eliminar todas las etiquetas restantes
    html = re.sub(r'<[^>]+>', '', html)

    # Entidades con nombre y numéricas; &nbsp; queda como espacio normal
    html = unescape(html).replace('\xa0', ' ')

    # Normalizar espacios y saltos de línea excesivos
    html = re.sub(r'[ \t]+', ' ', html)
    html = re.sub(r' *\n *', '\n', html)
    html = re.sub(r'\n{3,}', '\n\n', html)

    return html.strip()
