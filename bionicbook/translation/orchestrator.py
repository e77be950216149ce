# bionicbook/translation/orchestrator.py
import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable

from bionicbook.control import RunToken
from bionicbook.processor.chunker.models import Chunk, ChunkStatus
from bionicbook.translation.models import RunStatus, TranslationOutcome, TranslationSnapshot

logger = logging.getLogger(__name__)

TranslateFn = Callable[[str, str], Awaitable[str]]

PARAGRAPH_SEPARATOR = "\n\n"


class TranslationOrchestrator:
    """
    Traduce una lista de chunks de uno en uno, en orden de id.

    Responsabilidades:
    - Una sola traducción en vuelo a la vez (contrapresión hacia el backend)
    - Consultar pausa/cancelación antes de cada chunk
    - Manejar errores por chunk sin detener el run
    - Reensamblar el texto traducido en orden de id

    Cada instancia es un run: su estado no se comparte con ningún otro.
    """

    def __init__(
        self,
        token:            RunToken | None = None,
        request_interval: float           = 0.0,
        timeout_seconds:  float | None    = None,
    ):
        self._token            = token or RunToken()
        self._request_interval = request_interval
        self._timeout_seconds  = timeout_seconds
        self._chunks: list[Chunk] = []
        self._status           = RunStatus.IDLE
        self._current: int | None = None
        self._started          = False

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        self._token.pause()

    def resume(self) -> None:
        self._token.resume()

    def cancel(self) -> None:
        self._token.cancel()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def progress(self) -> int:
        total = len(self._chunks)
        if total == 0:
            return 100 if self._status == RunStatus.COMPLETED else 0
        done = sum(
            1 for c in self._chunks
            if c.status in (ChunkStatus.COMPLETED, ChunkStatus.FAILED)
        )
        return int(done * 100 / total)

    def snapshot(self) -> TranslationSnapshot:
        return TranslationSnapshot(
            status        = self._status,
            progress      = self.progress,
            chunks        = tuple(c.snapshot() for c in self._chunks),
            current_chunk = self._current,
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(
        self,
        chunks:       list[Chunk],
        notes:        str,
        translate_fn: TranslateFn,
    ) -> AsyncIterator[TranslationSnapshot]:
        """
        Generador asíncrono: emite un snapshot tras cada transición.
        Termina cuando todos los chunks están COMPLETED/FAILED o el run
        se cancela.
        """
        if self._started:
            raise RuntimeError("Un TranslationOrchestrator solo puede ejecutarse una vez")
        self._started = True

        _assert_contiguous_ids(chunks)
        self._chunks = chunks
        self._status = RunStatus.RUNNING
        logger.info("Traducción iniciada: %d chunks", len(chunks))
        yield self.snapshot()

        first_request = True

        for chunk in self._chunks:
            if chunk.status != ChunkStatus.PENDING:
                continue

            if not first_request and self._request_interval > 0:
                await asyncio.sleep(self._request_interval)

            # ── Punto de suspensión: pausa / cancelación ──────────────
            if self._token.paused:
                self._status = RunStatus.PAUSED
                logger.info("Traducción en pausa antes del chunk %d", chunk.id)
                yield self.snapshot()

            if not await self._token.checkpoint():
                self._status  = RunStatus.CANCELLED
                self._current = None
                logger.info("Traducción cancelada antes del chunk %d", chunk.id)
                yield self.snapshot()
                return

            if self._status == RunStatus.PAUSED:
                self._status = RunStatus.RUNNING
                logger.info("Traducción reanudada en el chunk %d", chunk.id)

            # ── Traducir el chunk ─────────────────────────────────────
            first_request = False
            self._current = chunk.id
            chunk.transition(ChunkStatus.TRANSLATING)
            yield self.snapshot()

            await self._translate_chunk(chunk, notes, translate_fn)
            yield self.snapshot()

        self._current = None
        self._status  = RunStatus.COMPLETED
        logger.info(
            "Traducción terminada: %d fallidos de %d",
            len(self.snapshot().failed_ids), len(self._chunks),
        )
        yield self.snapshot()

    async def translate_all(
        self,
        chunks:       list[Chunk],
        notes:        str,
        translate_fn: TranslateFn,
    ) -> TranslationOutcome:
        """Atajo: consume el run completo y devuelve el reensamblado."""
        async for _ in self.run(chunks, notes, translate_fn):
            pass
        return self.assemble()

    def assemble(self, include_original: bool = False) -> TranslationOutcome:
        """
        Une los chunks COMPLETED en orden de id con separador de párrafo.
        Los FAILED/PENDING se omiten del texto pero se reportan por id.

        Con include_original, cada traducción va precedida de su original
        como párrafo propio (edición bilingüe).
        """
        ordered = sorted(self._chunks, key=lambda c: c.id)
        completed = [c for c in ordered if c.status == ChunkStatus.COMPLETED]

        if include_original:
            parts = [
                part
                for c in completed
                for part in (c.original_text, c.translated_text)
            ]
        else:
            parts = [c.translated_text for c in completed]

        return TranslationOutcome(
            text          = PARAGRAPH_SEPARATOR.join(parts),
            total_chunks  = len(ordered),
            completed_ids = [c.id for c in completed],
            failed_ids    = [c.id for c in ordered if c.status == ChunkStatus.FAILED],
            pending_ids   = [
                c.id for c in ordered
                if c.status in (ChunkStatus.PENDING, ChunkStatus.TRANSLATING)
            ],
        )

    # ------------------------------------------------------------------
    # Pasos internos
    # ------------------------------------------------------------------

    async def _translate_chunk(
        self,
        chunk:        Chunk,
        notes:        str,
        translate_fn: TranslateFn,
    ) -> None:
        """Un fallo aquí marca el chunk FAILED; nunca se propaga al run."""
        try:
            if self._timeout_seconds is not None:
                translated = await asyncio.wait_for(
                    translate_fn(chunk.original_text, notes),
                    timeout=self._timeout_seconds,
                )
            else:
                translated = await translate_fn(chunk.original_text, notes)

            if not isinstance(translated, str):
                raise TypeError(
                    f"El traductor devolvió {type(translated).__name__}, se esperaba str"
                )

        except Exception as e:
            chunk.error = f"{type(e).__name__}: {e}"
            chunk.transition(ChunkStatus.FAILED)
            logger.warning("Error en chunk %d: %s — continuando", chunk.id, chunk.error)
            return

        chunk.translated_text = translated
        chunk.transition(ChunkStatus.COMPLETED)
        logger.debug("Chunk %d traducido (%d caracteres)", chunk.id, len(translated))


def _assert_contiguous_ids(chunks: list[Chunk]) -> None:
    ids = [c.id for c in chunks]
    if ids != list(range(len(chunks))):
        raise ValueError(f"Los ids de chunk deben ser 0..n-1 en orden, recibidos: {ids}")
