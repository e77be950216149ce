# bionicbook/factory.py
from typing import Optional

from bionicbook.config import ProcessingConfig
from bionicbook.packaging.base import BasePackager
from bionicbook.packaging.epub_packager import EpubPackager
from bionicbook.packaging.html_packager import HtmlPackager
from bionicbook.packaging.text_packager import TextPackager
from bionicbook.pipeline.controller import PipelineController
from bionicbook.processor.extractors.factory import ExtractorFactory, PlainTextExtraction
from bionicbook.translation.base import BaseTranslator
from bionicbook.translation.loader import load_translator
from bionicbook.validation.validator import LengthRatioValidator


_PACKAGERS: dict[str, type[BasePackager]] = {
    "epub": EpubPackager,
    "html": HtmlPackager,
    "txt":  TextPackager,
}


def build_controller(
    config:      ProcessingConfig,
    config_path: Optional[str]            = None,
    translator:  Optional[BaseTranslator] = None,
) -> PipelineController:
    """
    Ensambla el PipelineController con todas sus dependencias.
    Punto de entrada único para la CLI y los tests de integración.

    Si la traducción está activa y no se pasa translator, se carga
    el declarado en el YAML de configuración.
    """
    if translator is None and config.enable_translation:
        translator = load_translator(config.target_language, config_path)

    return PipelineController(
        extractor       = ExtractorFactory(),
        text_extraction = PlainTextExtraction(),
        packager        = build_packager(config.output_format),
        translator      = translator,
        validator       = LengthRatioValidator(),
    )


def build_packager(output_format: str) -> BasePackager:
    packager_class = _PACKAGERS.get(output_format, EpubPackager)
    return packager_class()
