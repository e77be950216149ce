import asyncio
import logging
from abc import ABC, abstractmethod

from bionicbook.exceptions import ExtractionError
from bionicbook.processor.models import Document, MediaKind, StructuredContent

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """Contrato del colaborador Extract: Document -> StructuredContent."""

    @abstractmethod
    def can_handle(self, kind: MediaKind) -> bool:
        """Devuelve True si el extractor puede manejar este tipo de documento"""
        raise NotImplementedError

    @abstractmethod
    async def extract(self, document: Document) -> StructuredContent:
        """Lanza ExtractionError si el documento no se puede leer"""
        raise NotImplementedError


class BlockingExtractor(BaseExtractor):
    """
    Base para extractores que envuelven librerías síncronas (ebooklib, pymupdf).
    El trabajo se hace en un hilo para no bloquear el event loop, y cualquier
    error de la librería sale como ExtractionError.
    """

    @abstractmethod
    def parse(self, document: Document) -> StructuredContent:
        raise NotImplementedError

    async def extract(self, document: Document) -> StructuredContent:
        try:
            return await asyncio.to_thread(self.parse, document)
        except ExtractionError:
            raise
        except Exception as e:
            logger.warning("Fallo extrayendo '%s': %s", document.name, e)
            raise ExtractionError(
                f"No se pudo leer '{document.name}' ({document.kind.value}): "
                f"{type(e).__name__}: {e}"
            ) from e


class BaseTextExtraction(ABC):
    """Contrato del colaborador ExtractText: StructuredContent -> texto plano."""

    @abstractmethod
    async def to_plain_text(self, content: StructuredContent) -> str:
        raise NotImplementedError
