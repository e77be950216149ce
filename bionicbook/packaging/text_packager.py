from bionicbook.config import BionicConfig
from bionicbook.processor.bionic import BionicDocument, plain_text
from .base import BlockingPackager


class TextPackager(BlockingPackager):
    """
    Texto plano UTF-8, un párrafo por bloque separado por línea en blanco.

    El texto plano no lleva formato: el énfasis bionic se descarta y el
    resultado es el texto (traducido, si hubo traducción) listo para copiar.
    """

    media_type = "text/plain"
    extension = ".txt"

    def build(self, content: BionicDocument, config: BionicConfig) -> bytes:
        paragraphs = [plain_text(runs) for runs in content.paragraphs]
        return ("\n\n".join(paragraphs) + "\n").encode("utf-8")
