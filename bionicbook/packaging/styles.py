# bionicbook/packaging/styles.py
from bionicbook.config import BionicConfig
from bionicbook.processor.bionic import BionicDocument, render_html


def build_stylesheet(config: BionicConfig) -> str:
    """CSS derivado del BionicConfig. Compartido por EPUB y HTML."""
    m = config.margins
    return (
        "body {\n"
        f"  font-family: '{config.font_family}', sans-serif;\n"
        f"  font-size: {config.font_size}px;\n"
        f"  line-height: {config.line_height};\n"
        f"  margin: {m.top}px {m.right}px {m.bottom}px {m.left}px;\n"
        "}\n"
        "p {\n"
        "  margin-top: 0;\n"
        f"  margin-bottom: {config.paragraph_spacing}em;\n"
        "}\n"
        "strong { font-weight: 700; }\n"
    )


def render_paragraphs(content: BionicDocument) -> str:
    return "\n".join(f"<p>{render_html(runs)}</p>" for runs in content.paragraphs)
