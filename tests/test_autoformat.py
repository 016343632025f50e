from __future__ import annotations

import re

import pytest

from md_autoformat.autoformat import (
    autoformat_document,
    convert_from_markdown_string,
    try_convert_block,
)
from md_autoformat.criteria import default_scan_rules, looks_like_code_block_boundary
from md_autoformat.exceptions import ConvergenceError, InvariantViolationError
from md_autoformat.models import CriteriaType, MarkdownCriteria, ScanningContext, ScanRules
from md_autoformat.nodes import (
    CodeBlockNode,
    HeadingNode,
    HorizontalRuleNode,
    LineBreakNode,
    ListItemNode,
    ParagraphNode,
    RootNode,
    TextNode,
    create_paragraph_node,
    create_text_node,
)
from md_autoformat.outline import render_outline
from md_autoformat.transforms import transform_text_node_for_paragraphs

FENCE = MarkdownCriteria(CriteriaType.CODE_BLOCK, re.compile(r"^```$"))


def _document(*texts: str) -> RootNode:
    return RootNode().append(
        *(create_paragraph_node().append(create_text_node(text)) for text in texts)
    )


def _rules(*criteria: MarkdownCriteria) -> ScanRules:
    return ScanRules(
        criteria=criteria,
        code_block_criteria=FENCE,
        is_code_block_boundary=looks_like_code_block_boundary,
    )


def _texts(document: RootNode) -> list[str]:
    return [block.get_text_content() for block in document.get_children()]


class RecordingRewrite:
    """Rewrite hook that records what it was asked to do and changes nothing."""

    def __init__(self):
        self.calls: list[tuple[str, CriteriaType, bool]] = []

    def __call__(self, ctx: ScanningContext, create_horizontal_rule_node=None) -> None:
        self.calls.append(
            (ctx.joined_text, ctx.markdown_criteria.criteria_type, ctx.is_within_code_block)
        )
        if ctx.markdown_criteria.criteria_type is CriteriaType.CODE_BLOCK:
            ctx.is_within_code_block = not ctx.is_within_code_block


def test_end_to_end_heading_paragraph_and_list_item():
    document = _document("# Title", "plain text", "- item")

    autoformat_document(document)

    heading, paragraph, item = document.get_children()
    assert isinstance(heading, HeadingNode)
    assert heading.tag == "h1"
    assert heading.get_text_content() == "Title"
    assert isinstance(paragraph, ParagraphNode)
    assert paragraph.get_text_content() == "plain text"
    assert isinstance(item, ListItemNode)
    assert item.list_type == "bullet"
    assert item.get_text_content() == "item"

    # Fixed point: a second sweep changes nothing.
    before = document.get_children()
    assert autoformat_document(document) == 0
    assert document.get_children() == before


def test_matched_block_is_rewritten_exactly_once():
    document = _document("## Section")
    calls = []

    def rewrite(ctx, create_horizontal_rule_node=None):
        calls.append(ctx.markdown_criteria.tag)
        transform_text_node_for_paragraphs(ctx, create_horizontal_rule_node)

    autoformat_document(document, rewrite)

    assert calls == ["h2"]
    assert isinstance(document.get_first_child(), HeadingNode)
    assert document.get_first_child().get_text_content() == "Section"


def test_catalog_scan_continues_after_a_match():
    rewrite = RecordingRewrite()
    first = MarkdownCriteria(CriteriaType.HEADING, re.compile(r"^a"))
    second = MarkdownCriteria(CriteriaType.QUOTE, re.compile(r"^ab"))
    ctx = ScanningContext()
    paragraph = _document("abc").get_first_child()

    try_convert_block(ctx, paragraph, _rules(first, second), rewrite)

    assert rewrite.calls == [
        ("abc", CriteriaType.HEADING, False),
        ("abc", CriteriaType.QUOTE, False),
    ]


def test_criteria_not_requiring_paragraph_start_are_skipped():
    rewrite = RecordingRewrite()
    inline = MarkdownCriteria(
        CriteriaType.HEADING, re.compile(r".*"), requires_paragraph_start=False
    )

    autoformat_document(_document("**bold**"), rewrite, rules=_rules(inline))

    assert rewrite.calls == []


def test_empty_paragraphs_and_non_paragraph_elements_are_not_probed():
    rewrite = RecordingRewrite()
    anything = MarkdownCriteria(CriteriaType.HEADING, re.compile(r".*"))
    document = _document("", "text")
    document.get_children()[1].replace(HeadingNode("h2").append(TextNode("# heading")))

    autoformat_document(document, rewrite, rules=_rules(anything))

    assert rewrite.calls == []


def test_decorator_blocks_are_skipped():
    document = _document("# Title")
    document.append(HorizontalRuleNode())

    autoformat_document(document)

    assert isinstance(document.get_children()[1], HorizontalRuleNode)


def test_paragraph_starting_with_non_text_node_violates_invariant():
    document = RootNode().append(ParagraphNode().append(LineBreakNode(), TextNode("# x")))

    with pytest.raises(InvariantViolationError) as excinfo:
        autoformat_document(document)

    assert excinfo.value.expectation == "Expect paragraph containing only text nodes."


def test_invariant_violation_is_not_a_no_match():
    ctx = ScanningContext()
    paragraph = ParagraphNode().append(LineBreakNode())
    RootNode().append(paragraph)

    with pytest.raises(InvariantViolationError):
        try_convert_block(ctx, paragraph, default_scan_rules())


def test_restart_resumes_at_the_rewritten_index():
    visited: list[str] = []

    def record(anchor):
        visited.append(anchor.node.text)
        return True

    splitter = MarkdownCriteria(CriteriaType.HEADING, re.compile(r"^split$"), predicate=record)

    def rewrite(ctx, create_horizontal_rule_node=None):
        replacement = create_paragraph_node().append(create_text_node("done"))
        ctx.element_node.replace(replacement)
        replacement.insert_after(create_paragraph_node().append(create_text_node("inserted")))

    document = _document("a", "split", "b")

    restarts = autoformat_document(document, rewrite, rules=_rules(splitter))

    assert restarts == 1
    assert visited == ["a", "split", "done", "inserted", "b"]
    assert _texts(document) == ["a", "done", "inserted", "b"]


def test_code_block_flag_persists_between_fences():
    rewrite = RecordingRewrite()
    body_probe = MarkdownCriteria(CriteriaType.QUOTE, re.compile(r"^body$"))

    autoformat_document(
        _document("```", "body", "```"), rewrite, rules=_rules(FENCE, body_probe)
    )

    assert rewrite.calls == [
        ("```", CriteriaType.CODE_BLOCK, False),
        ("body", CriteriaType.QUOTE, True),
        ("```", CriteriaType.CODE_BLOCK, True),
    ]


def test_closing_fence_uses_code_block_criteria_and_skips_catalog():
    seen = []

    def rewrite(ctx, create_horizontal_rule_node=None):
        seen.append(ctx.markdown_criteria)

    probe = MarkdownCriteria(CriteriaType.QUOTE, re.compile(r".*"))
    ctx = ScanningContext(is_within_code_block=True)
    paragraph = _document("```").get_first_child()

    try_convert_block(ctx, paragraph, _rules(probe), rewrite)

    assert seen == [FENCE]
    assert ctx.joined_text == "```"
    assert ctx.element_node is paragraph


def test_runaway_rewrite_raises_convergence_error():
    grow = MarkdownCriteria(CriteriaType.HEADING, re.compile(r"^grow$"))

    def rewrite(ctx, create_horizontal_rule_node=None):
        ctx.element_node.insert_after(create_paragraph_node().append(create_text_node("grow")))

    with pytest.raises(ConvergenceError) as excinfo:
        autoformat_document(_document("grow"), rewrite, rules=_rules(grow), max_restarts=5)

    assert excinfo.value.max_restarts == 5


def test_negative_restart_cap_is_rejected():
    with pytest.raises(ValueError):
        autoformat_document(_document("x"), max_restarts=-1)


def test_restart_cap_does_not_affect_converging_catalog():
    document = _document("```", "a", "b", "```", "# Done")

    restarts = autoformat_document(document, max_restarts=3)

    assert restarts == 3
    assert [block.kind for block in document.get_children()] == ["code", "heading"]


def test_code_fence_collapses_into_code_block():
    document = convert_from_markdown_string("```python\nx = 1\n\ny = 2\n```\nafter")

    code, paragraph = document.get_children()
    assert code.kind == "code"
    assert code.language == "python"
    assert code.is_open is False
    assert code.get_lines() == ["x = 1", "", "y = 2"]
    assert isinstance(paragraph, ParagraphNode)
    assert paragraph.get_text_content() == "after"


def test_shorthand_inside_code_block_stays_literal():
    document = convert_from_markdown_string("```\n# not a heading\n- nor a list\n```")

    (code,) = document.get_children()
    assert code.language is None
    assert code.get_lines() == ["# not a heading", "- nor a list"]


def test_blocks_after_code_block_are_still_formatted():
    document = convert_from_markdown_string("```\ncode\n```\n# Heading\n- item")

    assert [block.kind for block in document.get_children()] == ["code", "heading", "list-item"]


def test_unterminated_fence_runs_to_end_of_document():
    document = convert_from_markdown_string("intro\n```\nline one\n\n")

    intro, code = document.get_children()
    assert intro.get_text_content() == "intro"
    assert code.is_open is True
    assert code.get_lines() == ["line one", "", ""]


def test_convert_from_markdown_string_returns_none_for_empty_text():
    document = RootNode()

    assert convert_from_markdown_string("", document) is None
    assert document.get_children() == []


def test_convert_from_markdown_string_fills_given_document():
    document = RootNode()

    result = convert_from_markdown_string("> quoted", document)

    assert result is document
    assert document.get_first_child().kind == "quote"
    assert document.get_first_child().get_text_content() == "quoted"


def test_heading_after_unclosed_fence_ends_the_code_block():
    document = _document("```", "# y")
    document.get_first_child().insert_after(HeadingNode("h2").append(TextNode("existing")))

    autoformat_document(document)
    outline = render_outline(document)

    assert outline == ["code", "heading(h2): existing", "heading(h1): y"]
    assert autoformat_document(document) == 0
    assert render_outline(document) == outline


def test_decorator_after_unclosed_fence_ends_the_code_block():
    document = _document("```", "- item")
    document.get_first_child().insert_after(HorizontalRuleNode())

    autoformat_document(document)

    code, rule, item = document.get_children()
    assert isinstance(code, CodeBlockNode)
    assert code.get_lines() == []
    assert isinstance(rule, HorizontalRuleNode)
    assert isinstance(item, ListItemNode)
