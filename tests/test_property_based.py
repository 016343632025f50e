from __future__ import annotations

from hypothesis import assume, given
from hypothesis import strategies as st

from md_autoformat.autoformat import autoformat_document, convert_from_markdown_string
from md_autoformat.importer import import_plain_text
from md_autoformat.nodes import RootNode, create_horizontal_rule_node
from md_autoformat.outline import render_outline

shorthand_lines = st.sampled_from(
    [
        "# Title",
        "## Section",
        "plain text",
        "- item",
        "* item",
        "2. second",
        "> quote",
        "```",
        "```python",
        "---",
        "",
        "print('hi')",
    ]
)


@given(st.text(min_size=1))
def test_import_yields_one_block_per_line(text: str):
    document = RootNode()

    import_plain_text(text, document)

    assert document.get_children_size() == len(text.split("\n"))


@given(st.text(min_size=1))
def test_import_preserves_line_text(text: str):
    document = RootNode()

    import_plain_text(text, document)

    assert [block.get_text_content() for block in document.get_children()] == text.split("\n")


@given(st.lists(shorthand_lines, min_size=1, max_size=30))
def test_sweep_restarts_are_bounded_by_block_count(lines: list[str]):
    document = RootNode()
    import_plain_text("\n".join(lines), document)
    block_count = document.get_children_size()

    restarts = autoformat_document(
        document, create_horizontal_rule_node=create_horizontal_rule_node
    )

    assert restarts <= block_count


@given(st.lists(shorthand_lines, min_size=1, max_size=30))
def test_autoformat_reaches_a_fixed_point(lines: list[str]):
    text = "\n".join(lines)
    assume(text)
    document = convert_from_markdown_string(
        text, create_horizontal_rule_node=create_horizontal_rule_node
    )
    outline = render_outline(document)

    restarts = autoformat_document(
        document, create_horizontal_rule_node=create_horizontal_rule_node
    )

    assert restarts == 0
    assert render_outline(document) == outline


@given(st.lists(shorthand_lines, min_size=1, max_size=30))
def test_autoformat_is_deterministic(lines: list[str]):
    text = "\n".join(lines)
    assume(text)

    first = convert_from_markdown_string(text)
    second = convert_from_markdown_string(text)

    assert render_outline(first) == render_outline(second)
