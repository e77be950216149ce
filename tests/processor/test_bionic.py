import pytest

from bionicbook.config import BionicConfig
from bionicbook.processor.bionic import (
    BionicTransformer,
    TextRun,
    bold_length,
    plain_text,
    render_html,
    render_markdown,
    transform,
)


def emphasized_prefix(word: str, bold_percentage: int) -> str:
    runs = transform(word, bold_percentage)
    return runs[0].text if runs and runs[0].emphasized else ""


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


def test_hello_world_al_50_por_ciento():
    runs = transform("Hello world", 50)

    assert render_markdown(runs) == "**Hel**lo **wor**ld"
    assert runs == [
        TextRun("Hel", True),
        TextRun("lo ", False),
        TextRun("wor", True),
        TextRun("ld", False),
    ]


def test_palabras_cortas_no_se_enfatizan():
    runs = transform("a to is ok", 80)

    assert runs == [TextRun("a to is ok", False)]


def test_texto_vacio_devuelve_lista_vacia():
    assert transform("", 40) == []
    assert transform("   \n\t ", 40) == []


def test_espacios_se_colapsan_a_uno():
    """Transformación con pérdida: espacios múltiples y saltos quedan en un espacio."""
    runs = transform("  Hello \n\t world  ", 50)

    assert plain_text(runs) == "Hello world"


# ---------------------------------------------------------------------------
# Longitud del prefijo
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("n", range(3, 15))
@pytest.mark.parametrize("p", [0, 1, 10, 25, 33, 40, 50, 66, 75, 99, 100])
def test_longitud_del_prefijo_es_ceil_acotado(n, p):
    word = "x" * n
    expected = max(1, min(n, -(-n * p // 100)))

    assert bold_length(n, p) == expected
    assert len(emphasized_prefix(word, p)) == expected


def test_porcentaje_cero_enfatiza_al_menos_un_caracter():
    assert emphasized_prefix("reading", 0) == "r"


def test_porcentaje_cien_enfatiza_la_palabra_completa():
    runs = transform("reading", 100)

    assert runs == [TextRun("reading", True)]


def test_longitud_se_mide_en_caracteres_no_en_bytes():
    # "über" son 4 caracteres (5 bytes en UTF-8): al 50 % → 2 caracteres
    assert emphasized_prefix("über", 50) == "üb"
    # 5 caracteres CJK (15 bytes): al 40 % → 2 caracteres
    assert emphasized_prefix("日本語です", 40) == "日本"


# ---------------------------------------------------------------------------
# Renderizadores
# ---------------------------------------------------------------------------


def test_render_html_escapa_el_contenido():
    runs = transform("<script> & friends", 50)

    html = render_html(runs)

    assert "<script>" not in html
    assert "<strong>&lt;scr</strong>ipt&gt;" in html
    assert "&amp;" in html


def test_plain_text_recupera_las_palabras():
    text = "Die ersten Buchstaben jedes Wortes werden fett dargestellt"

    assert plain_text(transform(text, 40)) == text


# ---------------------------------------------------------------------------
# BionicTransformer
# ---------------------------------------------------------------------------


def test_transformer_conserva_los_parrafos():
    transformer = BionicTransformer(BionicConfig(bold_percentage=50))
    text = "Hello world\n\nSecond paragraph\n\n\n  \n\nThird"

    doc = transformer.transform_document(text, title="Libro", language="en")

    assert doc.title == "Libro"
    assert doc.language == "en"
    assert [plain_text(p) for p in doc.paragraphs] == [
        "Hello world",
        "Second paragraph",
        "Third",
    ]
    assert render_markdown(doc.paragraphs[0]) == "**Hel**lo **wor**ld"


def test_transformer_usa_el_porcentaje_del_config():
    transformer = BionicTransformer(BionicConfig(bold_percentage=100))

    assert transformer.transform("word") == [TextRun("word", True)]
