from md_autoformat.importer import import_plain_text
from md_autoformat.nodes import (
    ParagraphNode,
    RootNode,
    TextNode,
    create_paragraph_node,
    create_text_node,
)


def test_import_builds_one_paragraph_per_line():
    document = RootNode()

    result = import_plain_text("# Title\nplain text\n- item", document)

    assert result is document
    blocks = document.get_children()
    assert [block.get_text_content() for block in blocks] == ["# Title", "plain text", "- item"]
    assert all(isinstance(block, ParagraphNode) for block in blocks)


def test_each_paragraph_holds_exactly_one_text_run():
    document = RootNode()

    import_plain_text("a\nb", document)

    for block in document.get_children():
        children = block.get_children()
        assert len(children) == 1
        assert isinstance(children[0], TextNode)


def test_import_keeps_markup_as_raw_text():
    document = RootNode()

    import_plain_text("```python\n**bold**", document)

    assert document.get_children()[0].get_text_content() == "```python"
    assert document.get_children()[1].get_text_content() == "**bold**"


def test_empty_string_returns_none_and_leaves_document_untouched():
    document = RootNode()
    existing = create_paragraph_node().append(create_text_node("keep me"))
    document.append(existing)

    assert import_plain_text("", document) is None
    assert document.get_children() == [existing]


def test_trailing_line_break_yields_trailing_empty_paragraph():
    document = RootNode()

    import_plain_text("line\n", document)

    assert [block.get_text_content() for block in document.get_children()] == ["line", ""]


def test_only_line_breaks_yield_empty_paragraphs():
    document = RootNode()

    import_plain_text("\n\n", document)

    blocks = document.get_children()
    assert len(blocks) == 3
    assert all(isinstance(block, ParagraphNode) for block in blocks)
    assert all(block.get_text_content() == "" for block in blocks)


def test_import_replaces_existing_blocks():
    document = RootNode()
    old = create_paragraph_node().append(create_text_node("old"))
    document.append(old)

    import_plain_text("new", document)

    assert [block.get_text_content() for block in document.get_children()] == ["new"]
    assert old.get_parent() is None
