# bionicbook/cli.py
import asyncio
import logging
import signal
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from bionicbook.config import load_processing_config
from bionicbook.exceptions import ConfigError
from bionicbook.factory import build_controller
from bionicbook.pipeline.models import (
    Cancelled,
    Failure,
    PartialSuccess,
    PipelineSnapshot,
    StageName,
    StageStatus,
)
from bionicbook.processor.bionic import render_html, render_markdown, transform
from bionicbook.processor.models import Document


# Carga .env una sola vez, antes que cualquier otra cosa
load_dotenv()

_EXIT_CANCELLED = 130


# ------------------------------------------------------------------
# Grupo raíz
# ------------------------------------------------------------------

@click.group()
@click.version_option(package_name="bionicbook")
def main():
    """
    bionicbook: lectura bionic para tus libros.

    Extrae el texto de un EPUB, PDF o TXT, lo traduce opcionalmente
    y lo vuelve a empaquetar con el inicio de cada palabra en negrita.
    """


# ------------------------------------------------------------------
# bionicbook process
# ------------------------------------------------------------------

@main.command()
@click.option(
    "--input", "-i", "input_path",
    required = True,
    type     = click.Path(exists=False),   # validamos nosotros para mejor mensaje
    help     = "Documento de entrada (.epub, .pdf, .txt, .md)",
)
@click.option(
    "--output", "-o", "output_path",
    type = click.Path(dir_okay=False),
    help = "Ruta del artefacto. Por defecto: <nombre>_bionic.<formato> junto a la entrada",
)
@click.option(
    "--format", "output_format",
    type = click.Choice(["epub", "html", "txt"], case_sensitive=False),
    help = "Formato de salida (por defecto epub; txt es texto plano sin énfasis)",
)
@click.option("--bold", "bold_percentage", type=int, help="Porcentaje de cada palabra en negrita (0-100)")
@click.option("--font-size", type=int, help="Tamaño de fuente en px")
@click.option("--line-height", type=float, help="Interlineado")
@click.option("--font-family", help="Familia tipográfica (ej: Inter, Georgia)")
@click.option(
    "--translate/--no-translate",
    default = None,
    help    = "Traduce el documento antes de aplicar bionic",
)
@click.option("--to", "target_lang", metavar="LANG", help="Idioma de destino (ej: de, es, fr)")
@click.option("--notes", help="Indicaciones para el traductor (tono, registro...)")
@click.option(
    "--include-original/--no-include-original",
    default = None,
    help    = "Antepone a cada chunk traducido su texto original",
)
@click.option("--chunk-size", type=int, help="Máximo de caracteres por chunk de traducción")
@click.option(
    "--config", "config_path",
    type = click.Path(exists=False),
    help = "Config YAML (por defecto ~/.bionicbook/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Muestra el log detallado")
def process(
    input_path: str,
    output_path: str | None,
    output_format: str | None,
    bold_percentage: int | None,
    font_size: int | None,
    line_height: float | None,
    font_family: str | None,
    translate: bool | None,
    target_lang: str | None,
    notes: str | None,
    include_original: bool | None,
    chunk_size: int | None,
    config_path: str | None,
    verbose: bool,
):
    """Procesa un documento: extracción → [traducción] → bionic → empaquetado."""
    _configure_logging(verbose)

    # ── Validaciones de entrada ───────────────────────────────────
    _validate_file(input_path)
    if target_lang is not None:
        _validate_lang(target_lang, "--to")

    try:
        config = load_processing_config(
            config_path,
            enable_translation     = translate,
            target_language        = target_lang.lower() if target_lang else None,
            translation_notes      = notes,
            include_original       = include_original,
            chunk_size             = chunk_size,
            output_format          = output_format.lower() if output_format else None,
            bionic_bold_percentage = bold_percentage,
            bionic_font_size       = font_size,
            bionic_line_height     = line_height,
            bionic_font_family     = font_family,
        )
    except (ConfigError, FileNotFoundError) as e:
        _abort(str(e))

    # ── Ensamblar pipeline ────────────────────────────────────────
    try:
        controller = build_controller(config, config_path)
        document   = Document.from_path(input_path)
    except (ConfigError, FileNotFoundError) as e:
        _abort(str(e))

    target = Path(output_path) if output_path else _default_output(input_path, controller.packager.extension)

    # ── Ejecutar ──────────────────────────────────────────────────
    try:
        result = asyncio.run(_run_pipeline(controller, document, config))

    except KeyboardInterrupt:
        click.echo("\n[bionicbook] Proceso interrumpido.")
        sys.exit(_EXIT_CANCELLED)

    except ConfigError as e:
        _abort(str(e))

    # ── Resumen final ─────────────────────────────────────────────
    if isinstance(result, Failure):
        _error(f"Falló la etapa {result.stage_name.value}: {result.error}")
        sys.exit(1)

    if isinstance(result, Cancelled):
        click.echo(f"[bionicbook] Cancelado antes de completar {result.stage_name.value}. No se generó salida.")
        sys.exit(_EXIT_CANCELLED)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.artifact)
    _print_summary(result, target)


async def _run_pipeline(controller, document, config):
    run = controller.start(document, config)
    run.subscribe(_StageReporter())

    # Ctrl-C cancela de forma cooperativa: el run termina en el siguiente punto seguro
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, run.cancel)
    except (NotImplementedError, RuntimeError):
        pass  # Windows / hilo secundario: queda el KeyboardInterrupt normal

    try:
        return await run.execute()
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


class _StageReporter:
    """Observador que imprime los cambios de estado de cada etapa."""

    def __init__(self):
        self._seen: dict[StageName, tuple[StageStatus, int]] = {}

    def __call__(self, snapshot: PipelineSnapshot) -> None:
        for stage in snapshot.stages:
            previous = self._seen.get(stage.name)
            current  = (stage.status, stage.progress)
            if previous == current:
                continue
            self._seen[stage.name] = current

            if stage.status == StageStatus.PROCESSING:
                if stage.name == StageName.TRANSLATE and stage.progress > 0:
                    click.echo(f"[bionicbook] {stage.name.value}... {stage.progress}%")
                elif previous is None or previous[0] != StageStatus.PROCESSING:
                    click.echo(f"[bionicbook] {stage.name.value}...")
            elif stage.status == StageStatus.COMPLETED:
                click.echo(f"[bionicbook] ✓ {stage.name.value}")
            elif stage.status == StageStatus.FAILED:
                click.echo(
                    click.style(f"[bionicbook] ⚠ {stage.name.value}: {stage.error}", fg="yellow")
                )


# ------------------------------------------------------------------
# bionicbook preview
# ------------------------------------------------------------------

@main.command()
@click.option("--text", "-t", help="Texto a transformar. Si se omite, se lee de stdin")
@click.option("--bold", "bold_percentage", default=40, show_default=True, type=click.IntRange(0, 100))
@click.option(
    "--format", "output_format",
    default      = "markdown",
    show_default = True,
    type         = click.Choice(["markdown", "html"], case_sensitive=False),
)
def preview(text: str | None, bold_percentage: int, output_format: str):
    """Muestra cómo queda un texto en lectura bionic."""
    if text is None:
        text = click.get_text_stream("stdin").read()

    runs = transform(text, bold_percentage)
    rendered = render_html(runs) if output_format.lower() == "html" else render_markdown(runs)
    click.echo(rendered)


# ------------------------------------------------------------------
# Helpers de validación
# ------------------------------------------------------------------

def _validate_file(path: str) -> None:
    """Verifica existencia y formato del archivo."""
    p = Path(path)

    if not p.exists():
        _abort(f"Archivo no encontrado: {path}")

    if not p.is_file():
        _abort(f"La ruta no es un archivo: {path}")

    supported = Document.supported_extensions()
    if p.suffix.lower() not in supported:
        _abort(
            f"Formato no soportado: '{p.suffix}'\n"
            f"Formatos disponibles: {', '.join(supported)}"
        )


def _validate_lang(code: str, option: str) -> None:
    """Valida que el código de idioma sea razonable."""
    code = code.strip()

    if not code:
        _abort(f"{option} no puede estar vacío.")

    if not code.replace("-", "").isalpha():
        _abort(
            f"{option} contiene caracteres inválidos: '{code}'\n"
            f"Ejemplos válidos: en, es, de, fr, pt-br"
        )

    if len(code) > 10:
        _abort(f"{option}: código de idioma demasiado largo: '{code}'")


def _default_output(input_path: str, extension: str) -> Path:
    p = Path(input_path)
    return p.with_name(f"{p.stem}_bionic{extension}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level  = logging.INFO if verbose else logging.WARNING,
        format = "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ------------------------------------------------------------------
# Helpers de output
# ------------------------------------------------------------------

def _print_summary(result, output: Path) -> None:
    """Imprime el resumen final del pipeline."""
    click.echo("")
    click.echo("─" * 50)

    if isinstance(result, PartialSuccess):
        click.echo("[bionicbook] ⚠ Proceso completado con avisos")
        for warning in result.warnings:
            click.echo(click.style(f"[bionicbook]   - {warning}", fg="yellow"))
    else:
        click.echo("[bionicbook] ✓ Proceso completado")

    chunks = result.snapshot.chunks
    if chunks:
        click.echo(f"[bionicbook]   Chunks       : {len(chunks)}")

    click.echo(f"[bionicbook]   Output       : {output}")
    click.echo("─" * 50)


def _abort(message: str) -> None:
    """Error de validación: culpa del usuario."""
    click.echo(click.style(f"[bionicbook] Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _error(message: str) -> None:
    """Error de sistema: no es culpa del usuario."""
    click.echo(click.style(f"[bionicbook] {message}", fg="red"), err=True)
