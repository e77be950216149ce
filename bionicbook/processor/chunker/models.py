from dataclasses import dataclass
from enum import Enum


class ChunkStatus(Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    COMPLETED = "completed"
    FAILED = "failed"


# Transiciones válidas: PENDING -> TRANSLATING -> {COMPLETED | FAILED}
_ALLOWED_TRANSITIONS: dict[ChunkStatus, set[ChunkStatus]] = {
    ChunkStatus.PENDING: {ChunkStatus.TRANSLATING},
    ChunkStatus.TRANSLATING: {ChunkStatus.COMPLETED, ChunkStatus.FAILED},
    ChunkStatus.COMPLETED: set(),
    ChunkStatus.FAILED: set(),
}


@dataclass(frozen=True)
class ChunkSnapshot:
    """Copia inmutable de un Chunk. Es lo único que ven los observadores."""
    id: int
    original_text: str
    translated_text: str
    status: ChunkStatus
    error: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "original_text": self.original_text,
            "translated_text": self.translated_text,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass
class Chunk:
    """
    Unidad de traducción.
    El id es estable y define el orden de reensamblado.
    Solo el TranslationOrchestrator lo muta.
    """
    id: int
    original_text: str
    translated_text: str = ""
    status: ChunkStatus = ChunkStatus.PENDING
    error: str = ""

    def transition(self, status: ChunkStatus) -> None:
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise RuntimeError(
                f"Transición inválida en chunk {self.id}: "
                f"{self.status.value} -> {status.value}"
            )
        self.status = status

    def snapshot(self) -> ChunkSnapshot:
        return ChunkSnapshot(
            id=self.id,
            original_text=self.original_text,
            translated_text=self.translated_text,
            status=self.status,
            error=self.error,
        )


def build_chunks(texts: list[str]) -> list[Chunk]:
    """Crea los chunks en bloque con ids contiguos 0..n-1."""
    return [Chunk(id=i, original_text=text) for i, text in enumerate(texts)]
