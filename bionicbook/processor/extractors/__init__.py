from bionicbook.processor.extractors.base import BaseExtractor, BaseTextExtraction, BlockingExtractor
from bionicbook.processor.extractors.factory import (
    ExtractorFactory,
    PlainTextExtraction,
    UnsupportedFormatError,
)
from bionicbook.processor.extractors.epub_extractor import EpubExtractor
from bionicbook.processor.extractors.pdf_extractor import PdfExtractor
from bionicbook.processor.extractors.txt_extractor import TxtExtractor

__all__ = [
    "BaseExtractor",
    "BaseTextExtraction",
    "BlockingExtractor",
    "ExtractorFactory",
    "PlainTextExtraction",
    "UnsupportedFormatError",
    "EpubExtractor",
    "PdfExtractor",
    "TxtExtractor",
]
