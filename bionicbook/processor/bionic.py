# bionicbook/processor/bionic.py
import html
import re
from dataclasses import dataclass, field

from bionicbook.config import BionicConfig

_PARAGRAPH_RE = re.compile(r'\n\s*\n')

# Palabras de esta longitud o menos no se enfatizan
_MIN_WORD_LENGTH = 3


@dataclass(frozen=True)
class TextRun:
    text: str
    emphasized: bool = False


@dataclass
class BionicDocument:
    """Contenido ya transformado, listo para el Packager."""
    title: str
    paragraphs: list[list[TextRun]] = field(default_factory=list)
    language: str | None = None


def bold_length(word_length: int, bold_percentage: int) -> int:
    """ceil(n * p / 100) acotado a [1, n], en aritmética entera."""
    length = (word_length * bold_percentage + 99) // 100
    return max(1, min(word_length, length))


def transform(text: str, bold_percentage: int) -> list[TextRun]:
    """
    Convierte texto plano en runs plano/enfatizado.

    Con pérdida: los espacios originales se colapsan a un único espacio
    entre palabras. Sirve para leer, no para reconstruir el original.
    """
    runs: list[TextRun] = []

    for i, word in enumerate(text.split()):
        if i > 0:
            _append(runs, " ", emphasized=False)

        # len() de str cuenta caracteres, no bytes
        if len(word) < _MIN_WORD_LENGTH:
            _append(runs, word, emphasized=False)
            continue

        cut = bold_length(len(word), bold_percentage)
        _append(runs, word[:cut], emphasized=True)
        _append(runs, word[cut:], emphasized=False)

    return runs


def _append(runs: list[TextRun], text: str, emphasized: bool) -> None:
    """Añade un run fusionándolo con el anterior si comparten estilo."""
    if not text:
        return
    if runs and runs[-1].emphasized == emphasized:
        runs[-1] = TextRun(runs[-1].text + text, emphasized)
    else:
        runs.append(TextRun(text, emphasized))


# ------------------------------------------------------------------
# Renderizadores
# ------------------------------------------------------------------

def plain_text(runs: list[TextRun]) -> str:
    return "".join(run.text for run in runs)


def render_markdown(runs: list[TextRun]) -> str:
    return "".join(
        f"**{run.text}**" if run.emphasized else run.text
        for run in runs
    )


def render_html(runs: list[TextRun]) -> str:
    return "".join(
        f"<strong>{html.escape(run.text)}</strong>" if run.emphasized
        else html.escape(run.text)
        for run in runs
    )


# ------------------------------------------------------------------
# Transformer con configuración
# ------------------------------------------------------------------

class BionicTransformer:
    """
    Aplica un BionicConfig a un texto de varios párrafos.
    Los párrafos (separados por línea en blanco) se conservan;
    dentro de cada uno rige la transformación por palabra.
    """

    def __init__(self, config: BionicConfig | None = None):
        self._config = config or BionicConfig()

    @property
    def config(self) -> BionicConfig:
        return self._config

    def transform(self, text: str) -> list[TextRun]:
        return transform(text, self._config.bold_percentage)

    def transform_document(
        self,
        text: str,
        title: str,
        language: str | None = None,
    ) -> BionicDocument:
        paragraphs = [
            self.transform(block)
            for block in split_paragraphs(text)
        ]
        return BionicDocument(title=title, paragraphs=paragraphs, language=language)


def split_paragraphs(text: str) -> list[str]:
    return [b.strip() for b in _PARAGRAPH_RE.split(text) if b.strip()]
