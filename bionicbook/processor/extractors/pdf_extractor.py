# bionicbook/processor/extractors/pdf_extractor.py
from bionicbook.processor.models import Document, MediaKind, StructuredContent
from .base import BlockingExtractor

_MIN_SECTION_WORDS = 40


class PdfExtractor(BlockingExtractor):
    """
    Extractor para documentos .pdf.

    Extrae el texto de cada página usando PyMuPDF (fitz).
    Las páginas muy cortas se fusionan con la siguiente.

    Requiere: pip install pymupdf
    """

    def can_handle(self, kind: MediaKind) -> bool:
        return kind == MediaKind.PDF

    def parse(self, document: Document) -> StructuredContent:
        try:
            import fitz  # pymupdf
        except ImportError:
            raise ImportError(
                "El soporte PDF requiere pymupdf. Instálalo con: pip install pymupdf"
            )

        with fitz.open(stream=document.payload, filetype="pdf") as doc:
            pages = [page.get_text("text").strip() for page in doc]

        pages = [p for p in pages if p]

        return StructuredContent(
            title=self._extract_title(pages, document.name),
            sections=self._merge_short_pages(pages),
            language=None,
        )

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _extract_title(self, pages: list[str], fallback: str) -> str:
        """Usa la primera línea no vacía de la primera página, o el nombre del documento."""
        if pages:
            first_line = pages[0].split("\n")[0].strip()
            words = first_line.split()
            if words and len(words) <= 12 and not first_line.endswith("."):
                return first_line
        return fallback

    def _merge_short_pages(self, pages: list[str]) -> list[str]:
        """Fusiona páginas muy cortas con la siguiente para no partir párrafos de más."""
        sections: list[str] = []
        buffer = ""

        for page in pages:
            buffer = (buffer + "\n\n" + page).strip() if buffer else page
            if len(buffer.split()) >= _MIN_SECTION_WORDS:
                sections.append(buffer)
                buffer = ""

        if buffer:
            if sections:
                sections[-1] += "\n\n" + buffer
            else:
                sections.append(buffer)

        return sections
