# tests/test_cli.py
import sys
import types
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from bionicbook.cli import main
from bionicbook.exceptions import TranslationError
from bionicbook.pipeline.models import (
    Cancelled,
    Failure,
    PipelineSnapshot,
    PipelineStatus,
    StageName,
)
from bionicbook.translation.base import BaseTranslator


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """La CLI nunca lee el ~/.bionicbook/config.yaml real."""
    monkeypatch.setenv("BIONICBOOK_CONFIG_PATH", str(tmp_path / "sin-config.yaml"))


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def book_file(tmp_path) -> Path:
    f = tmp_path / "libro.txt"
    f.write_text("Mi Libro\n\nHello world", encoding="utf-8")
    return f


class ShoutTranslator(BaseTranslator):
    def __init__(self, target_language: str, fail_on: str = ""):
        self.target_language = target_language
        self.fail_on = fail_on

    async def translate(self, text: str, notes: str) -> str:
        if self.fail_on and text == self.fail_on:
            raise TranslationError("no disponible")
        return text.upper()


@pytest.fixture
def translator_config(tmp_path, monkeypatch):
    """Config YAML con un traductor cargado desde un módulo registrado en sys.modules."""
    module = types.ModuleType("bionic_cli_plugins")
    module.build = ShoutTranslator
    monkeypatch.setitem(sys.modules, "bionic_cli_plugins", module)

    def _write(options: str = "") -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(
            "translator:\n"
            "  factory: \"bionic_cli_plugins:build\"\n"
            + options,
            encoding="utf-8",
        )
        return path

    return _write


def mock_controller(result) -> MagicMock:
    run = MagicMock()
    run.execute = AsyncMock(return_value=result)
    controller = MagicMock()
    controller.packager.extension = ".epub"
    controller.start.return_value = run
    return controller


def empty_snapshot(status: PipelineStatus) -> PipelineSnapshot:
    return PipelineSnapshot(status=status, stages=())


# ------------------------------------------------------------------
# bionicbook process
# ------------------------------------------------------------------

class TestProcess:

    def test_genera_html_junto_a_la_entrada(self, runner, book_file):
        result = runner.invoke(main, [
            "process", "-i", str(book_file), "--format", "html", "--bold", "50",
        ])

        assert result.exit_code == 0, result.output
        output = book_file.with_name("libro_bionic.html")
        assert output.exists()
        page = output.read_text(encoding="utf-8")
        assert "<strong>Hel</strong>lo <strong>wor</strong>ld" in page
        assert "Proceso completado" in result.output
        assert "ApplyBionic" in result.output

    def test_genera_epub_en_la_ruta_indicada(self, runner, book_file, tmp_path):
        target = tmp_path / "salida" / "libro.epub"

        result = runner.invoke(main, ["process", "-i", str(book_file), "-o", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_bytes()[:2] == b"PK"

    def test_archivo_inexistente(self, runner, tmp_path):
        result = runner.invoke(main, ["process", "-i", str(tmp_path / "falta.txt")])

        assert result.exit_code == 1
        assert "Archivo no encontrado" in result.output

    def test_formato_no_soportado(self, runner, tmp_path):
        f = tmp_path / "informe.docx"
        f.write_bytes(b"PK")

        result = runner.invoke(main, ["process", "-i", str(f)])

        assert result.exit_code == 1
        assert "Formato no soportado" in result.output

    def test_bold_fuera_de_rango(self, runner, book_file):
        result = runner.invoke(main, ["process", "-i", str(book_file), "--bold", "150"])

        assert result.exit_code == 1
        assert "bold_percentage" in result.output

    def test_idioma_invalido(self, runner, book_file):
        result = runner.invoke(main, ["process", "-i", str(book_file), "--translate", "--to", "d3"])

        assert result.exit_code == 1
        assert "caracteres inválidos" in result.output

    def test_traducir_sin_traductor_configurado(self, runner, book_file):
        result = runner.invoke(main, ["process", "-i", str(book_file), "--translate", "--to", "de"])

        assert result.exit_code == 1
        assert "Ningún traductor configurado" in result.output

    def test_traduce_con_el_traductor_del_config(self, runner, book_file, translator_config):
        config = translator_config()

        result = runner.invoke(main, [
            "process", "-i", str(book_file), "--format", "html",
            "--translate", "--to", "DE", "--bold", "50", "--config", str(config),
        ])

        assert result.exit_code == 0, result.output
        page = book_file.with_name("libro_bionic.html").read_text(encoding="utf-8")
        assert '<html lang="de">' in page
        assert "<strong>HEL</strong>LO" in page
        assert "Translate" in result.output
        assert "Chunks" in result.output

    def test_traduccion_a_texto_plano_con_original(self, runner, book_file, translator_config):
        config = translator_config()

        result = runner.invoke(main, [
            "process", "-i", str(book_file), "--format", "txt",
            "--translate", "--include-original", "--config", str(config),
        ])

        assert result.exit_code == 0, result.output
        output = book_file.with_name("libro_bionic.txt")
        assert output.read_text(encoding="utf-8") == (
            "Mi Libro\n\nHello world\n\nMI LIBRO\n\nHELLO WORLD\n"
        )

    def test_config_malformado_es_error_de_usuario(self, runner, book_file, tmp_path):
        config = tmp_path / "roto.yaml"
        config.write_text("processing:\n  bionic: 40\n", encoding="utf-8")

        result = runner.invoke(main, ["process", "-i", str(book_file), "--config", str(config)])

        assert result.exit_code == 1
        assert "processing.bionic" in result.output

    def test_chunk_fallido_termina_con_avisos(self, runner, tmp_path, translator_config):
        book = tmp_path / "cuento.txt"
        book.write_text("Alpha beta. Gamma delta. Epsilon.", encoding="utf-8")
        config = translator_config("  options:\n    fail_on: \"Gamma delta\"\n")

        result = runner.invoke(main, [
            "process", "-i", str(book), "--format", "html", "--translate",
            "--chunk-size", "12", "--config", str(config),
        ])

        assert result.exit_code == 0, result.output
        assert "completado con avisos" in result.output
        assert "chunk 1 sin traducir" in result.output

    def test_fallo_del_pipeline_sale_con_1(self, runner, book_file):
        failure = Failure(
            stage_name = StageName.PACKAGE,
            error      = "PackagingError: disco lleno",
            snapshot   = empty_snapshot(PipelineStatus.FAILED),
        )

        with patch("bionicbook.cli.build_controller", return_value=mock_controller(failure)):
            result = runner.invoke(main, ["process", "-i", str(book_file)])

        assert result.exit_code == 1
        assert "Falló la etapa Package" in result.output
        assert not book_file.with_name("libro_bionic.epub").exists()

    def test_cancelacion_sale_con_130(self, runner, book_file):
        cancelled = Cancelled(
            stage_name = StageName.TRANSLATE,
            snapshot   = empty_snapshot(PipelineStatus.CANCELLED),
        )

        with patch("bionicbook.cli.build_controller", return_value=mock_controller(cancelled)):
            result = runner.invoke(main, ["process", "-i", str(book_file)])

        assert result.exit_code == 130
        assert "No se generó salida" in result.output


# ------------------------------------------------------------------
# bionicbook preview
# ------------------------------------------------------------------

class TestPreview:

    def test_markdown_por_defecto(self, runner):
        result = runner.invoke(main, ["preview", "--text", "Hello world", "--bold", "50"])

        assert result.exit_code == 0
        assert result.output == "**Hel**lo **wor**ld\n"

    def test_lee_de_stdin(self, runner):
        result = runner.invoke(main, ["preview", "--bold", "50"], input="Hello world\n")

        assert result.exit_code == 0
        assert result.output == "**Hel**lo **wor**ld\n"

    def test_formato_html(self, runner):
        result = runner.invoke(main, ["preview", "-t", "Hello & bye", "--bold", "50", "--format", "html"])

        assert result.output == "<strong>Hel</strong>lo &amp; <strong>by</strong>e\n"

    def test_bold_fuera_de_rango_es_error_de_uso(self, runner):
        result = runner.invoke(main, ["preview", "-t", "Hello", "--bold", "101"])

        assert result.exit_code == 2
