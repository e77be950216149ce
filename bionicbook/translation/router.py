# translation/router.py
import logging

from bionicbook.exceptions import TranslationError
from bionicbook.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class AllTranslatorsExhaustedError(TranslationError):
    """Ningún traductor pudo completar la petición."""
    pass


class TranslatorRouter(BaseTranslator):
    """
    Traductor compuesto: decide qué traductor usar en cada llamada.
    El orquestador lo ve como un traductor más.

    Responsabilidades:
    - Probar los traductores en orden de prioridad
    - Hacer failover si uno falla por error de red o rate limit
    - Propagar errores de contenido (no son de disponibilidad)
    """

    def __init__(self, translators: list[BaseTranslator]):
        # La lista ya viene ordenada por prioridad desde el config
        if not translators:
            raise ValueError("El TranslatorRouter necesita al menos un traductor")
        self._translators = list(translators)

    @property
    def name(self) -> str:
        return "router(" + ", ".join(t.name for t in self._translators) + ")"

    async def translate(self, text: str, notes: str) -> str:
        """
        Intenta traducir con el primer traductor; si falla con un error
        retryable pasa al siguiente.
        Lanza AllTranslatorsExhaustedError si todos fallan.
        """
        last_error: Exception | None = None

        for translator in self._translators:
            try:
                logger.debug("Intentando traducción con %s", translator.name)
                return await translator.translate(text, notes)

            except Exception as e:
                if _is_content_error(e):
                    logger.error(
                        "Error de contenido en %s — no se hace failover: %s",
                        translator.name, e,
                    )
                    raise

                logger.warning(
                    "Traductor %s falló con error retryable: %s. Pasando al siguiente.",
                    translator.name, e,
                )
                last_error = e

        raise AllTranslatorsExhaustedError(
            f"Ningún traductor disponible. Último error: {last_error}"
        )


def _is_content_error(e: Exception) -> bool:
    """
    Errores del contenido del chunk: son el mismo error en cualquier
    traductor, así que no activan failover.
    """
    if isinstance(e, TranslationError):
        return not e.retryable
    return isinstance(e, ValueError)
