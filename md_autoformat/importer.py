"""Plain-text import: one paragraph per line, no markup interpretation."""

from __future__ import annotations

from .nodes import RootNode, create_paragraph_node, create_text_node


def import_plain_text(text: str, document: RootNode) -> RootNode | None:
    """Replace the document's blocks with one paragraph per line of `text`.

    Splits on ``"\\n"`` only, so a trailing line break yields a trailing empty
    paragraph and a string of line breaks yields only empty paragraphs.

    Args:
        text: Raw text to import.
        document: Document whose top-level blocks are replaced.

    Returns:
        RootNode | None: The document, or None when `text` is empty, in which
            case the document is left untouched.

    Examples:
        import_plain_text("# Title\\nbody", RootNode())
    """
    if not text:
        return None

    paragraphs = [
        create_paragraph_node().append(create_text_node(line)) for line in text.split("\n")
    ]
    document.replace_children(paragraphs)
    return document
