# pipeline/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from bionicbook.exceptions import ValidationWarning
from bionicbook.processor.chunker.models import ChunkSnapshot


class StageName(Enum):
    EXTRACT              = "Extract"
    EXTRACT_TEXT         = "ExtractText"
    TRANSLATE            = "Translate"
    VALIDATE_TRANSLATION = "ValidateTranslation"
    APPLY_BIONIC         = "ApplyBionic"
    PACKAGE              = "Package"


class StageStatus(Enum):
    PENDING    = "pending"
    PROCESSING = "processing"
    COMPLETED  = "completed"
    FAILED     = "failed"


class PipelineStatus(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    FAILED    = "failed"
    CANCELLED = "cancelled"


_ALLOWED_TRANSITIONS: dict[StageStatus, set[StageStatus]] = {
    StageStatus.PENDING:    {StageStatus.PROCESSING},
    StageStatus.PROCESSING: {StageStatus.COMPLETED, StageStatus.FAILED},
    StageStatus.COMPLETED:  set(),
    StageStatus.FAILED:     set(),
}


# ------------------------------------------------------------------
# Etapas
# ------------------------------------------------------------------

@dataclass(frozen=True)
class StageSnapshot:
    name:     StageName
    status:   StageStatus
    progress: int
    error:    str

    def to_dict(self) -> dict:
        return {
            "name":     self.name.value,
            "status":   self.status.value,
            "progress": self.progress,
            "error":    self.error,
        }


@dataclass
class PipelineStage:
    """
    Estado mutable de una etapa. Solo el PipelineRun lo toca.
    Nunca regresa de COMPLETED/FAILED.
    """
    name:     StageName
    status:   StageStatus = StageStatus.PENDING
    progress: int         = 0
    error:    str         = ""

    def start(self) -> None:
        self._transition(StageStatus.PROCESSING)
        self.progress = 0

    def complete(self) -> None:
        self._transition(StageStatus.COMPLETED)
        self.progress = 100

    def fail(self, error: str) -> None:
        self._transition(StageStatus.FAILED)
        self.error = error

    def set_progress(self, progress: int) -> None:
        if self.status != StageStatus.PROCESSING:
            raise RuntimeError(
                f"La etapa {self.name.value} no está en curso ({self.status.value})"
            )
        self.progress = max(0, min(100, progress))

    def snapshot(self) -> StageSnapshot:
        return StageSnapshot(self.name, self.status, self.progress, self.error)

    def _transition(self, status: StageStatus) -> None:
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise RuntimeError(
                f"Transición inválida en etapa {self.name.value}: "
                f"{self.status.value} -> {status.value}"
            )
        self.status = status


def build_stages(enable_translation: bool) -> list[PipelineStage]:
    """4 etapas fijas; con traducción se insertan 2 entre ExtractText y ApplyBionic."""
    names = [StageName.EXTRACT, StageName.EXTRACT_TEXT]
    if enable_translation:
        names += [StageName.TRANSLATE, StageName.VALIDATE_TRANSLATION]
    names += [StageName.APPLY_BIONIC, StageName.PACKAGE]
    return [PipelineStage(name) for name in names]


# ------------------------------------------------------------------
# Snapshot del run: lo que consume la capa de presentación
# ------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineSnapshot:
    status:        PipelineStatus
    stages:        tuple[StageSnapshot, ...]
    chunks:        tuple[ChunkSnapshot, ...] = ()
    current_stage: Optional[StageName]       = None

    def stage(self, name: StageName) -> StageSnapshot:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name.value)

    @property
    def stage_names(self) -> list[str]:
        return [s.name.value for s in self.stages]

    def to_dict(self) -> dict:
        return {
            "status":        self.status.value,
            "current_stage": self.current_stage.value if self.current_stage else None,
            "stages":        [s.to_dict() for s in self.stages],
            "chunks":        [c.to_dict() for c in self.chunks],
        }


# ------------------------------------------------------------------
# Resultados terminales
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Success:
    artifact: bytes
    snapshot: PipelineSnapshot


@dataclass(frozen=True)
class PartialSuccess:
    """Hay artefacto, pero con fallos no fatales (chunks sin traducir, validación)."""
    artifact:           bytes
    snapshot:           PipelineSnapshot
    failed_chunk_ids:   tuple[int, ...]            = ()
    validation_warning: Optional[ValidationWarning] = None

    @property
    def warnings(self) -> list[str]:
        messages = [f"chunk {cid} sin traducir" for cid in self.failed_chunk_ids]
        if self.validation_warning is not None:
            messages.append(f"validación: {self.validation_warning}")
        return messages


@dataclass(frozen=True)
class Failure:
    """Fallo fatal: identifica la etapa y el error. Nunca lleva artefacto."""
    stage_name: StageName
    error:      str
    snapshot:   PipelineSnapshot
    exception:  Optional[BaseException] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Cancelled:
    """El run se detuvo a petición del usuario antes de stage_name."""
    stage_name: StageName
    snapshot:   PipelineSnapshot


PipelineResult = Union[Success, PartialSuccess, Failure, Cancelled]
