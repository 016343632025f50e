"""Readable and JSON-friendly views of a document tree.

These are inspection aids for the command line and for tests; they do not
produce markdown.
"""

from __future__ import annotations

from .nodes import (
    CodeBlockNode,
    ElementNode,
    HeadingNode,
    ListItemNode,
    Node,
    RootNode,
    TextNode,
)


def describe_block(block: Node) -> str:
    """Return the label used for a block in the outline.

    Examples:
        describe_block(HeadingNode("h2"))  # "heading(h2)"
        describe_block(ListItemNode("number", 3))  # "list-item(number:3)"
    """
    if isinstance(block, HeadingNode):
        return f"heading({block.tag})"
    if isinstance(block, ListItemNode):
        if block.list_type == "number":
            return f"list-item(number:{block.value})"
        return f"list-item({block.list_type})"
    if isinstance(block, CodeBlockNode):
        return f"code({block.language})" if block.language else "code"
    return block.kind


def render_outline(document: RootNode) -> list[str]:
    """Render one line per top-level block.

    Line breaks inside a block are shown as a literal ``\\n``.

    Args:
        document: Document to describe.

    Returns:
        list[str]: ``"<label>: <text>"`` lines, or just the label for blocks
            without text.

    Examples:
        render_outline(convert_from_markdown_string("# Title"))  # ["heading(h1): Title"]
    """
    lines = []
    for block in document.get_children():
        label = describe_block(block)
        text = block.get_text_content().replace("\n", "\\n")
        lines.append(f"{label}: {text}" if text else label)
    return lines


def document_to_dict(node: Node) -> dict[str, object]:
    """Convert a node and its descendants into plain dictionaries."""
    data: dict[str, object] = {"type": node.kind}
    if isinstance(node, TextNode):
        data["text"] = node.text
    if isinstance(node, HeadingNode):
        data["tag"] = node.tag
    if isinstance(node, ListItemNode):
        data["listType"] = node.list_type
        data["value"] = node.value
    if isinstance(node, CodeBlockNode):
        data["language"] = node.language
    if isinstance(node, ElementNode):
        data["children"] = [document_to_dict(child) for child in node.get_children()]
    return data
