# bionicbook/packaging/epub_packager.py
import hashlib
import html
import logging
import os
import tempfile

from bionicbook.config import BionicConfig
from bionicbook.processor.bionic import BionicDocument
from .base import BlockingPackager
from .styles import build_stylesheet, render_paragraphs

logger = logging.getLogger(__name__)

# Párrafos por documento XHTML; los lectores sufren con archivos enormes
_PARAGRAPHS_PER_FILE = 200


class EpubPackager(BlockingPackager):
    """
    Genera un EPUB con el texto bionic y una hoja de estilos
    derivada del BionicConfig.

    Dependencia: ebooklib  →  pip install ebooklib
    """

    media_type = "application/epub+zip"
    extension = ".epub"

    def __init__(self, default_language: str = "en"):
        self._default_language = default_language

    def build(self, content: BionicDocument, config: BionicConfig) -> bytes:
        try:
            from ebooklib import epub
        except ImportError:
            raise ImportError(
                "ebooklib no está instalado. "
                "Ejecuta: pip install ebooklib"
            )

        language = content.language or self._default_language

        book = epub.EpubBook()
        book.set_identifier(_identifier(content))
        book.set_title(content.title)
        book.set_language(language)

        css = epub.EpubItem(
            uid        = "bionic_style",
            file_name  = "style/bionic.css",
            media_type = "text/css",
            content    = build_stylesheet(config),
        )
        book.add_item(css)

        chapters = []
        for part, paragraphs in enumerate(_batches(content.paragraphs), start=1):
            chapter = epub.EpubHtml(
                title     = content.title if part == 1 else f"{content.title} ({part})",
                file_name = f"text/part_{part:03d}.xhtml",
                lang      = language,
            )
            body = render_paragraphs(BionicDocument(title=content.title, paragraphs=paragraphs))
            if part == 1:
                body = f"<h1>{html.escape(content.title)}</h1>\n{body}"
            chapter.content = body
            chapter.add_item(css)
            book.add_item(chapter)
            chapters.append(chapter)

        book.toc = tuple(chapters)
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = ["nav", *chapters]

        # ebooklib escribe a disco; leemos los bytes y limpiamos
        fd, tmp_path = tempfile.mkstemp(suffix=".epub")
        os.close(fd)
        try:
            epub.write_epub(tmp_path, book, {})
            with open(tmp_path, "rb") as f:
                data = f.read()
        finally:
            os.remove(tmp_path)

        logger.info(
            "EPUB generado: '%s' (%d partes, %d bytes)",
            content.title, len(chapters), len(data),
        )
        return data


def _batches(paragraphs: list) -> list[list]:
    return [
        paragraphs[i:i + _PARAGRAPHS_PER_FILE]
        for i in range(0, len(paragraphs), _PARAGRAPHS_PER_FILE)
    ]


def _identifier(content: BionicDocument) -> str:
    """Identificador estable: el mismo contenido produce el mismo id."""
    h = hashlib.sha256(content.title.encode("utf-8"))
    for runs in content.paragraphs:
        for run in runs:
            h.update(run.text.encode("utf-8"))
    return f"bionicbook-{h.hexdigest()[:16]}"
