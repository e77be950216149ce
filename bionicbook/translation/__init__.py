from bionicbook.translation.base import BaseTranslator
from bionicbook.translation.loader import load_translator
from bionicbook.translation.models import RunStatus, TranslationOutcome, TranslationSnapshot
from bionicbook.translation.orchestrator import TranslationOrchestrator
from bionicbook.translation.router import AllTranslatorsExhaustedError, TranslatorRouter

__all__ = [
    "BaseTranslator",
    "load_translator",
    "RunStatus",
    "TranslationOutcome",
    "TranslationSnapshot",
    "TranslationOrchestrator",
    "AllTranslatorsExhaustedError",
    "TranslatorRouter",
]
