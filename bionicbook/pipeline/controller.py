# bionicbook/pipeline/controller.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from bionicbook.config import ProcessingConfig
from bionicbook.control import RunToken
from bionicbook.exceptions import ConfigError, ValidationWarning
from bionicbook.packaging.base import BasePackager
from bionicbook.pipeline.models import (
    Cancelled,
    Failure,
    PartialSuccess,
    PipelineResult,
    PipelineSnapshot,
    PipelineStage,
    PipelineStatus,
    StageName,
    Success,
    build_stages,
)
from bionicbook.processor.bionic import BionicDocument, BionicTransformer
from bionicbook.processor.chunker.chunker import TextChunker
from bionicbook.processor.extractors.base import BaseExtractor, BaseTextExtraction
from bionicbook.processor.models import Document, StructuredContent
from bionicbook.translation.base import BaseTranslator
from bionicbook.translation.models import RunStatus, TranslationOutcome
from bionicbook.translation.orchestrator import TranslationOrchestrator
from bionicbook.validation.validator import BaseValidator, LengthRatioValidator, ValidationResult

logger = logging.getLogger(__name__)

Observer = Callable[[PipelineSnapshot], None]


# ------------------------------------------------------------------
# Señales internas para cortar el flujo de etapas
# ------------------------------------------------------------------

class _StageFailed(Exception):
    def __init__(self, stage: StageName, error: str, cause: BaseException | None = None):
        super().__init__(error)
        self.stage = stage
        self.error = error
        self.cause = cause


class _RunCancelled(Exception):
    def __init__(self, stage: StageName):
        super().__init__(stage.value)
        self.stage = stage


# ------------------------------------------------------------------
# Controller
# ------------------------------------------------------------------

class PipelineController:
    """
    Compone los colaboradores del pipeline y lanza runs.
    No guarda estado de ningún run: cada start() crea un PipelineRun aislado.
    """

    def __init__(
        self,
        extractor:       BaseExtractor,
        text_extraction: BaseTextExtraction,
        packager:        BasePackager,
        translator:      Optional[BaseTranslator] = None,
        validator:       Optional[BaseValidator]  = None,
    ):
        self._extractor       = extractor
        self._text_extraction = text_extraction
        self._packager        = packager
        self._translator      = translator
        self._validator       = validator or LengthRatioValidator()

    @property
    def packager(self) -> BasePackager:
        return self._packager

    def start(self, document: Document, config: ProcessingConfig) -> "PipelineRun":
        """
        Prepara un run. La configuración se valida aquí, de forma síncrona:
        un ConfigError nunca llega a ejecutar ninguna etapa.
        """
        config.validate()
        if config.enable_translation and self._translator is None:
            raise ConfigError("Traducción activada pero no hay traductor configurado")

        return PipelineRun(
            document        = document,
            config          = config,
            extractor       = self._extractor,
            text_extraction = self._text_extraction,
            packager        = self._packager,
            translator      = self._translator,
            validator       = self._validator,
        )

    async def run(
        self,
        document: Document,
        config:   ProcessingConfig,
        observer: Optional[Observer] = None,
    ) -> PipelineResult:
        """Atajo: start() + subscribe() + execute()."""
        run = self.start(document, config)
        if observer is not None:
            run.subscribe(observer)
        return await run.execute()


class PipelineRun:
    """
    Un run del pipeline. Es dueño exclusivo de su estado mutable
    (etapas, chunks, progreso); hacia fuera solo salen snapshots.

    Etapas: Extract → ExtractText → [Translate → ValidateTranslation]
            → ApplyBionic → Package
    """

    def __init__(
        self,
        document:        Document,
        config:          ProcessingConfig,
        extractor:       BaseExtractor,
        text_extraction: BaseTextExtraction,
        packager:        BasePackager,
        translator:      Optional[BaseTranslator],
        validator:       BaseValidator,
    ):
        self._document        = document
        self._config          = config
        self._extractor       = extractor
        self._text_extraction = text_extraction
        self._packager        = packager
        self._translator      = translator
        self._validator       = validator

        self._token      = RunToken()
        self._stages     = build_stages(config.enable_translation)
        self._status     = PipelineStatus.IDLE
        self._current: Optional[StageName] = None
        self._observers: list[Observer] = []
        self._translation: Optional[TranslationOrchestrator] = None
        self._result: Optional[PipelineResult] = None
        self._started    = False

    # ------------------------------------------------------------------
    # Superficie pública
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Registra un observador de snapshots. Devuelve la función para darse de baja."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def pause(self) -> None:
        self._token.pause()

    def resume(self) -> None:
        self._token.resume()
        if self._status == PipelineStatus.PAUSED:
            self._status = PipelineStatus.RUNNING
            self._notify()

    def cancel(self) -> None:
        self._token.cancel()

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def result(self) -> Optional[PipelineResult]:
        """None hasta que el run termina."""
        return self._result

    @property
    def done(self) -> bool:
        return self._result is not None

    def snapshot(self) -> PipelineSnapshot:
        chunks = self._translation.snapshot().chunks if self._translation else ()
        return PipelineSnapshot(
            status        = self._status,
            stages        = tuple(s.snapshot() for s in self._stages),
            chunks        = chunks,
            current_stage = self._current,
        )

    async def execute(self) -> PipelineResult:
        if self._started:
            raise RuntimeError("Un PipelineRun solo puede ejecutarse una vez")
        self._started = True

        self._status = PipelineStatus.RUNNING
        logger.info(
            "Procesando '%s' (%s) — %d etapas",
            self._document.name, self._document.kind.value, len(self._stages),
        )
        self._notify()

        try:
            result = await self._execute_stages()

        except _StageFailed as e:
            self._status = PipelineStatus.FAILED
            logger.error("Pipeline detenido en %s: %s", e.stage.value, e.error)
            result = Failure(
                stage_name = e.stage,
                error      = e.error,
                snapshot   = self._final_snapshot(),
                exception  = e.cause,
            )

        except _RunCancelled as e:
            self._status = PipelineStatus.CANCELLED
            logger.info("Pipeline cancelado antes de completar %s", e.stage.value)
            result = Cancelled(stage_name=e.stage, snapshot=self._final_snapshot())

        self._current = None
        self._result  = result
        self._notify()
        return result

    # ------------------------------------------------------------------
    # Etapas
    # ------------------------------------------------------------------

    async def _execute_stages(self) -> PipelineResult:
        content: StructuredContent = await self._run_stage(
            StageName.EXTRACT,
            lambda: self._extractor.extract(self._document),
        )
        text: str = await self._run_stage(
            StageName.EXTRACT_TEXT,
            lambda: self._text_extraction.to_plain_text(content),
        )

        final_text = text
        failed_chunk_ids: tuple[int, ...] = ()
        warning: Optional[ValidationWarning] = None

        if self._config.enable_translation:
            outcome = await self._translate(text)
            failed_chunk_ids = tuple(outcome.failed_ids)
            final_text, warning = await self._validate(text, outcome)
            # La validación mide solo la traducción; el bilingüe se arma después
            if self._config.include_original and outcome.text.strip():
                final_text = self._translation.assemble(include_original=True).text

        transformer = BionicTransformer(self._config.bionic)
        bionic: BionicDocument = await self._run_stage(
            StageName.APPLY_BIONIC,
            lambda: asyncio.to_thread(
                transformer.transform_document,
                final_text,
                content.title,
                self._target_language(content),
            ),
        )
        artifact: bytes = await self._run_stage(
            StageName.PACKAGE,
            lambda: self._packager.package(bionic, self._config.bionic),
        )

        self._status = PipelineStatus.COMPLETED
        snapshot = self._final_snapshot()

        if failed_chunk_ids or warning is not None:
            logger.warning(
                "Pipeline completado con avisos: %d chunks fallidos, validación: %s",
                len(failed_chunk_ids), warning or "ok",
            )
            return PartialSuccess(
                artifact           = artifact,
                snapshot           = snapshot,
                failed_chunk_ids   = failed_chunk_ids,
                validation_warning = warning,
            )

        logger.info("Pipeline completado: %d bytes", len(artifact))
        return Success(artifact=artifact, snapshot=snapshot)

    async def _run_stage(self, name: StageName, action: Callable[[], Awaitable[Any]]) -> Any:
        """
        Ejecuta una etapa simple: checkpoint → PROCESSING → acción →
        COMPLETED, o FAILED + _StageFailed si la acción lanza.
        """
        stage = await self._begin_stage(name)

        try:
            value = await action()
        except Exception as e:
            self._fail_stage(stage, f"{type(e).__name__}: {e}", e)

        stage.complete()
        self._notify()
        return value

    async def _translate(self, text: str) -> TranslationOutcome:
        """
        Etapa Translate. Los fallos por chunk no la hacen fallar
        (salvo fail_on_chunk_errors); el progreso refleja el del orquestador.
        """
        stage = await self._begin_stage(StageName.TRANSLATE)

        orchestrator = TranslationOrchestrator(
            token            = self._token,
            request_interval = self._config.request_interval,
            timeout_seconds  = self._config.timeout_seconds,
        )
        self._translation = orchestrator

        try:
            chunks = TextChunker(self._config.chunk_size).chunk(text)
            logger.info(
                "Traduciendo a '%s': %d chunks de hasta %d caracteres",
                self._config.target_language, len(chunks), self._config.chunk_size,
            )

            async for snap in orchestrator.run(
                chunks,
                self._config.translation_notes,
                self._translator.translate,
            ):
                stage.set_progress(snap.progress)
                if snap.status == RunStatus.PAUSED:
                    self._status = PipelineStatus.PAUSED
                elif self._status == PipelineStatus.PAUSED:
                    self._status = PipelineStatus.RUNNING
                self._notify()

        except Exception as e:
            self._fail_stage(stage, f"{type(e).__name__}: {e}", e)

        outcome = orchestrator.assemble()

        if orchestrator.status == RunStatus.CANCELLED:
            stage.fail("Cancelado por el usuario")
            self._notify()
            raise _RunCancelled(StageName.TRANSLATE)

        if outcome.failed_ids and self._config.fail_on_chunk_errors:
            self._fail_stage(
                stage,
                f"{len(outcome.failed_ids)} de {outcome.total_chunks} chunks "
                f"fallaron: {outcome.failed_ids}",
            )

        stage.complete()
        self._notify()
        return outcome

    async def _validate(
        self,
        original: str,
        outcome:  TranslationOutcome,
    ) -> tuple[str, Optional[ValidationWarning]]:
        """
        Etapa ValidateTranslation. Nunca detiene el pipeline: si falla,
        la etapa queda FAILED y se sigue con el mejor texto disponible.
        """
        stage = await self._begin_stage(StageName.VALIDATE_TRANSLATION)

        try:
            result = await self._validator.check(original, outcome.text)
        except Exception as e:
            result = ValidationResult(ok=False, reason=f"{type(e).__name__}: {e}")

        best_text = outcome.text if outcome.text.strip() else original

        if result.ok:
            stage.complete()
            self._notify()
            return best_text, None

        reason = result.reason or "La traducción no pasó la validación"
        stage.fail(reason)
        self._notify()
        logger.warning("Validación fallida (%s) — se continúa con el mejor texto disponible", reason)
        return best_text, ValidationWarning(reason)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _begin_stage(self, name: StageName) -> PipelineStage:
        """Punto de suspensión antes de cada etapa; luego la marca PROCESSING."""
        await self._checkpoint(name)

        stage = self._stage(name)
        stage.start()
        self._current = name
        logger.info("Etapa %s iniciada", name.value)
        self._notify()
        return stage

    async def _checkpoint(self, next_stage: StageName) -> None:
        if self._token.paused:
            self._status = PipelineStatus.PAUSED
            logger.info("Pipeline en pausa antes de %s", next_stage.value)
            self._notify()

        if not await self._token.checkpoint():
            raise _RunCancelled(next_stage)

        if self._status == PipelineStatus.PAUSED:
            self._status = PipelineStatus.RUNNING
            self._notify()

    def _fail_stage(
        self,
        stage: PipelineStage,
        error: str,
        cause: BaseException | None = None,
    ) -> None:
        stage.fail(error)
        self._notify()
        raise _StageFailed(stage.name, error, cause)

    def _stage(self, name: StageName) -> PipelineStage:
        for stage in self._stages:
            if stage.name == name:
                return stage
        raise KeyError(name.value)

    def _target_language(self, content: StructuredContent) -> Optional[str]:
        if self._config.enable_translation:
            return self._config.target_language
        return content.language

    def _final_snapshot(self) -> PipelineSnapshot:
        self._current = None
        return self.snapshot()

    def _notify(self) -> None:
        """Entrega un snapshot a cada observador. Un observador roto no afecta al run."""
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Error en observador del pipeline")
