import asyncio
import logging
from abc import ABC, abstractmethod

from bionicbook.config import BionicConfig
from bionicbook.exceptions import PackagingError
from bionicbook.processor.bionic import BionicDocument

logger = logging.getLogger(__name__)


class BasePackager(ABC):
    """Contrato del colaborador Package: BionicDocument -> artefacto binario."""

    media_type: str = "application/octet-stream"
    extension: str = ".bin"

    @abstractmethod
    async def package(self, content: BionicDocument, config: BionicConfig) -> bytes:
        """Lanza PackagingError si no se puede generar el artefacto"""
        raise NotImplementedError


class BlockingPackager(BasePackager):
    """
    Base para packagers síncronos: build() corre en un hilo y cualquier
    error de la librería sale como PackagingError.
    """

    @abstractmethod
    def build(self, content: BionicDocument, config: BionicConfig) -> bytes:
        raise NotImplementedError

    async def package(self, content: BionicDocument, config: BionicConfig) -> bytes:
        if not content.paragraphs:
            raise PackagingError(f"'{content.title}' no tiene contenido que empaquetar")
        try:
            return await asyncio.to_thread(self.build, content, config)
        except PackagingError:
            raise
        except Exception as e:
            logger.error("Fallo empaquetando '%s': %s", content.title, e)
            raise PackagingError(f"{type(e).__name__}: {e}") from e
