import logging

from bionicbook.exceptions import ExtractionError
from bionicbook.processor.models import Document, StructuredContent
from .base import BaseExtractor, BaseTextExtraction
from .epub_extractor import EpubExtractor
from .pdf_extractor import PdfExtractor
from .txt_extractor import TxtExtractor

logger = logging.getLogger(__name__)


class UnsupportedFormatError(ExtractionError):
    """Se lanza cuando ningún extractor registrado puede manejar el documento."""
    pass


class ExtractorFactory(BaseExtractor):
    """
    Registro central de extractores. Se comporta como un Extractor más:
    delega en el primero que responda True a can_handle().

    Uso con extractor registrado externamente:
        factory = ExtractorFactory()
        factory.register(MiExtractorCustom())
        content = await factory.extract(document)
    """

    def __init__(self, extractors: list[BaseExtractor] | None = None):
        if extractors is None:
            extractors = [EpubExtractor(), PdfExtractor(), TxtExtractor()]
        self._extractors: list[BaseExtractor] = list(extractors)

    def register(self, extractor: BaseExtractor) -> None:
        """Registra un extractor adicional al inicio de la lista (mayor prioridad)."""
        self._extractors.insert(0, extractor)

    def can_handle(self, kind) -> bool:
        return any(e.can_handle(kind) for e in self._extractors)

    def get_extractor(self, document: Document) -> BaseExtractor:
        for extractor in self._extractors:
            if extractor.can_handle(document.kind):
                return extractor
        raise UnsupportedFormatError(
            f"Tipo '{document.kind.value}' no soportado por ningún extractor registrado"
        )

    async def extract(self, document: Document) -> StructuredContent:
        extractor = self.get_extractor(document)
        logger.debug(
            "Extrayendo '%s' con %s", document.name, type(extractor).__name__
        )
        return await extractor.extract(document)


class PlainTextExtraction(BaseTextExtraction):
    """Une las secciones en un único texto, separadas por línea en blanco."""

    async def to_plain_text(self, content: StructuredContent) -> str:
        text = "\n\n".join(s.strip() for s in content.sections if s.strip())
        if not text:
            raise ExtractionError(f"'{content.title}' no contiene texto extraíble")
        return text
