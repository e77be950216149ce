import asyncio
import io
import re
import zipfile

import pytest

from bionicbook.config import BionicConfig, Margins
from bionicbook.exceptions import PackagingError
from bionicbook.packaging import EpubPackager, HtmlPackager, TextPackager
from bionicbook.packaging.styles import build_stylesheet
from bionicbook.processor.bionic import BionicDocument, BionicTransformer


def make_document(text="Hello world\n\nSecond paragraph here", title="Mi Libro", language="en"):
    transformer = BionicTransformer(BionicConfig(bold_percentage=50))
    return transformer.transform_document(text, title=title, language=language)


# ---------------------------------------------------------------------------
# Hoja de estilos
# ---------------------------------------------------------------------------


def test_stylesheet_refleja_el_config():
    config = BionicConfig(
        font_size=18,
        line_height=1.8,
        paragraph_spacing=2.0,
        font_family="Georgia",
        margins=Margins(left=10, right=12, top=5, bottom=7),
    )

    css = build_stylesheet(config)

    assert "font-family: 'Georgia', sans-serif;" in css
    assert "font-size: 18px;" in css
    assert "line-height: 1.8;" in css
    assert "margin: 5px 12px 7px 10px;" in css
    assert "margin-bottom: 2.0em;" in css


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


class TestHtmlPackager:

    def test_genera_pagina_con_negritas_y_estilos(self):
        data = asyncio.run(HtmlPackager().package(make_document(), BionicConfig()))

        page = data.decode("utf-8")
        assert page.startswith("<!DOCTYPE html>")
        assert '<html lang="en">' in page
        assert "<p><strong>Hel</strong>lo <strong>wor</strong>ld</p>" in page
        assert "font-family: 'Inter', sans-serif;" in page
        assert page.count("<p>") == 2

    def test_escapa_el_titulo(self):
        doc = make_document(title="<Tom & Jerry>")

        page = asyncio.run(HtmlPackager().package(doc, BionicConfig())).decode("utf-8")

        assert "<title>&lt;Tom &amp; Jerry&gt;</title>" in page

    def test_documento_sin_parrafos_lanza_packaging_error(self):
        empty = BionicDocument(title="Vacío", paragraphs=[])

        with pytest.raises(PackagingError):
            asyncio.run(HtmlPackager().package(empty, BionicConfig()))

    def test_extension_y_media_type(self):
        packager = HtmlPackager()

        assert packager.extension == ".html"
        assert packager.media_type == "text/html"


# ---------------------------------------------------------------------------
# TXT
# ---------------------------------------------------------------------------


class TestTextPackager:

    def test_texto_plano_sin_enfasis(self):
        data = asyncio.run(TextPackager().package(make_document(), BionicConfig()))

        assert data.decode("utf-8") == "Hello world\n\nSecond paragraph here\n"

    def test_conserva_caracteres_no_ascii(self):
        doc = make_document("Übersetzung für alle", language="de")

        data = asyncio.run(TextPackager().package(doc, BionicConfig()))

        assert data == "Übersetzung für alle\n".encode("utf-8")

    def test_documento_sin_parrafos_lanza_packaging_error(self):
        empty = BionicDocument(title="Vacío", paragraphs=[])

        with pytest.raises(PackagingError):
            asyncio.run(TextPackager().package(empty, BionicConfig()))

    def test_extension_y_media_type(self):
        assert TextPackager().extension == ".txt"
        assert TextPackager().media_type == "text/plain"


# ---------------------------------------------------------------------------
# EPUB
# ---------------------------------------------------------------------------


class TestEpubPackager:

    def test_genera_un_epub_valido(self):
        data = asyncio.run(EpubPackager().package(make_document(), BionicConfig(font_size=20)))

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = archive.namelist()
            assert archive.read("mimetype") == b"application/epub+zip"

            css_name = next(n for n in names if n.endswith("style/bionic.css"))
            assert b"font-size: 20px;" in archive.read(css_name)

            part_name = next(n for n in names if n.endswith("text/part_001.xhtml"))
            part = archive.read(part_name).decode("utf-8")
            assert "<strong>Hel</strong>lo" in part
            assert "Mi Libro" in part

    def test_documentos_largos_se_parten_en_varios_archivos(self):
        text = "\n\n".join(f"Paragraph number {i}" for i in range(450))

        data = asyncio.run(EpubPackager().package(make_document(text), BionicConfig()))

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            parts = [n for n in archive.namelist() if "/part_" in n]
        assert len(parts) == 3

    def test_mismo_contenido_mismo_identificador(self):
        packager = EpubPackager()
        doc = make_document()

        first = asyncio.run(packager.package(doc, BionicConfig()))
        second = asyncio.run(packager.package(doc, BionicConfig()))

        def identifier(data):
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                opf = next(n for n in archive.namelist() if n.endswith(".opf"))
                return re.search(r"bionicbook-[0-9a-f]{16}", archive.read(opf).decode("utf-8")).group(0)

        assert identifier(first) == identifier(second)
        assert identifier(first) != identifier(
            asyncio.run(packager.package(make_document("Other text entirely"), BionicConfig()))
        )

    def test_documento_sin_parrafos_lanza_packaging_error(self):
        empty = BionicDocument(title="Vacío", paragraphs=[])

        with pytest.raises(PackagingError):
            asyncio.run(EpubPackager().package(empty, BionicConfig()))
