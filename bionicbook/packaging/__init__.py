from bionicbook.packaging.base import BasePackager, BlockingPackager
from bionicbook.packaging.epub_packager import EpubPackager
from bionicbook.packaging.html_packager import HtmlPackager
from bionicbook.packaging.text_packager import TextPackager

__all__ = ["BasePackager", "BlockingPackager", "EpubPackager", "HtmlPackager", "TextPackager"]
