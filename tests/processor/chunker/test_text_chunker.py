import pytest

from bionicbook.exceptions import ConfigError
from bionicbook.processor.chunker import ChunkStatus, TextChunker, split_sentences, split_text

LOREM = (
    "This is a sample document that demonstrates the translation capabilities. "
    "The document contains multiple paragraphs and sentences! "
    "Each chunk will be sent for translation? "
    "The results will be combined into a final translated document.\n\n"
    "This approach allows us to handle large documents efficiently... "
    "It also keeps the order stable."
)


# ---------------------------------------------------------------------------
# Segmentación en oraciones
# ---------------------------------------------------------------------------


def test_split_sentences_descarta_terminadores_y_vacios():
    assert split_sentences("Wow!!! Really?? Yes... ") == ["Wow", "Really", "Yes"]


def test_split_sentences_texto_sin_puntuacion_es_una_oracion():
    assert split_sentences("  una sola frase sin punto  ") == ["una sola frase sin punto"]


# ---------------------------------------------------------------------------
# Agrupación en chunks
# ---------------------------------------------------------------------------


def test_ejemplo_un_chunk_por_oracion():
    assert split_text("A. B. C.", 3) == ["A", "B", "C"]


def test_oraciones_cortas_se_agrupan():
    chunks = split_text("One. Two. Three. Four.", 100)

    assert chunks == ["One Two Three Four"]


def test_se_vuelca_el_buffer_al_superar_el_limite():
    chunks = split_text("Alpha beta. Gamma delta. Epsilon.", 20)

    assert chunks == ["Alpha beta", "Gamma delta Epsilon"]


def test_saltos_de_parrafo_cuentan_como_un_solo_separador():
    assert split_text("A.\n\n\n\nB.", 5) == ["A B"]
    assert split_text("A.\n\n\n\nB.", 3) == ["A", "B"]


def test_oracion_sobredimensionada_forma_su_propio_chunk():
    long_sentence = "word " * 30
    text = f"Short. {long_sentence}. Tail."

    chunks = split_text(text, 20)

    assert chunks[0] == "Short"
    assert chunks[1] == long_sentence.strip()
    assert chunks[2] == "Tail"


def test_texto_vacio_no_produce_chunks():
    assert split_text("", 10) == []
    assert split_text(" ... !!! ", 10) == []


@pytest.mark.parametrize("max_chars", [1, 5, 20, 60, 120, 1000])
def test_ningun_chunk_supera_el_limite_salvo_oracion_unica(max_chars):
    sentences = split_sentences(LOREM)

    for chunk in split_text(LOREM, max_chars):
        if len(chunk) > max_chars:
            assert chunk in sentences


@pytest.mark.parametrize("max_chars", [1, 5, 20, 60, 120, 1000])
def test_no_se_pierde_ninguna_oracion(max_chars):
    chunks = split_text(LOREM, max_chars)

    assert " ".join(chunks) == " ".join(split_sentences(LOREM))
    assert all(chunks)


@pytest.mark.parametrize("max_chars", [0, -5])
def test_limite_no_positivo_lanza_config_error(max_chars):
    with pytest.raises(ConfigError):
        split_text("Hola.", max_chars)


# ---------------------------------------------------------------------------
# TextChunker
# ---------------------------------------------------------------------------


def test_chunker_crea_chunks_con_ids_contiguos():
    chunker = TextChunker(max_chunk_chars=3)

    chunks = chunker.chunk("A. B. C.")

    assert [c.id for c in chunks] == [0, 1, 2]
    assert [c.original_text for c in chunks] == ["A", "B", "C"]
    assert all(c.status == ChunkStatus.PENDING for c in chunks)
    assert all(c.translated_text == "" for c in chunks)


def test_chunker_permite_sobrescribir_el_limite():
    chunker = TextChunker(max_chunk_chars=1000)

    assert chunker.split("A. B. C.", 3) == ["A", "B", "C"]


def test_chunker_rechaza_limite_invalido():
    with pytest.raises(ConfigError):
        TextChunker(max_chunk_chars=0)
