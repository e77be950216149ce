# bionicbook/validation/validator.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: Optional[str] = None


class BaseValidator(ABC):
    """Contrato del colaborador ValidateTranslation."""

    @abstractmethod
    async def check(self, original: str, translated: str) -> ValidationResult:
        ...


class LengthRatioValidator(BaseValidator):
    """
    Chequeo de cordura barato: la traducción no está vacía y su longitud
    queda dentro de un rango razonable respecto al original.

    Los idiomas no ocupan lo mismo (el alemán suele alargar un 20-30 %),
    así que los límites son amplios: solo detectan salidas truncadas o
    respuestas que no son una traducción.
    """

    def __init__(self, min_ratio: float = 0.3, max_ratio: float = 3.0):
        if not 0 <= min_ratio < max_ratio:
            raise ValueError(f"Rango inválido: [{min_ratio}, {max_ratio}]")
        self._min_ratio = min_ratio
        self._max_ratio = max_ratio

    async def check(self, original: str, translated: str) -> ValidationResult:
        if not translated.strip():
            return ValidationResult(ok=False, reason="La traducción está vacía")

        original_len = len(original.strip())
        if original_len == 0:
            return ValidationResult(ok=True)

        ratio = len(translated.strip()) / original_len
        if ratio < self._min_ratio:
            return ValidationResult(
                ok=False,
                reason=f"Traducción demasiado corta ({ratio:.2f}x el original)",
            )
        if ratio > self._max_ratio:
            return ValidationResult(
                ok=False,
                reason=f"Traducción demasiado larga ({ratio:.2f}x el original)",
            )
        return ValidationResult(ok=True)
