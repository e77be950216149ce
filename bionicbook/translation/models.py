# translation/models.py
from dataclasses import dataclass, field
from enum import Enum

from bionicbook.processor.chunker.models import ChunkSnapshot, ChunkStatus


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TranslationSnapshot:
    """Estado del run de traducción en un instante. Inmutable."""
    status: RunStatus
    progress: int
    chunks: tuple[ChunkSnapshot, ...] = ()
    current_chunk: int | None = None

    @property
    def failed_ids(self) -> list[int]:
        return [c.id for c in self.chunks if c.status == ChunkStatus.FAILED]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "progress": self.progress,
            "current_chunk": self.current_chunk,
            "chunks": [c.to_dict() for c in self.chunks],
        }


@dataclass
class TranslationOutcome:
    """Resultado del reensamblado: solo los chunks COMPLETED, en orden de id."""
    text: str
    total_chunks: int
    completed_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)
    pending_ids: list[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.failed_ids and not self.pending_ids
