import html

from bionicbook.config import BionicConfig
from bionicbook.processor.bionic import BionicDocument
from .base import BlockingPackager
from .styles import build_stylesheet, render_paragraphs

_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
{css}</style>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


class HtmlPackager(BlockingPackager):
    """Página HTML autocontenida. Útil como vista previa sin lector de EPUB."""

    media_type = "text/html"
    extension = ".html"

    def build(self, content: BionicDocument, config: BionicConfig) -> bytes:
        page = _TEMPLATE.format(
            lang  = html.escape(content.language or "en"),
            title = html.escape(content.title),
            css   = build_stylesheet(config),
            body  = render_paragraphs(content),
        )
        return page.encode("utf-8")
