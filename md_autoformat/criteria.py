"""Catalog of markdown shorthand criteria.

The catalog is built fresh on every call so callers can reorder or extend it
without affecting other scans. Every criterion here requires a paragraph
start, and at most one of them matches any given paragraph.
"""

from __future__ import annotations

from .constants import (
    CLOSING_FENCE_PATTERN,
    CODE_FENCE_PATTERN,
    CODE_LINE_PATTERN,
    HEADING_PATTERNS,
    HORIZONTAL_RULE_PATTERN,
    ORDERED_LIST_PATTERN,
    QUOTE_PATTERN,
    UNORDERED_LIST_PATTERN,
)
from .models import (
    CriteriaType,
    MarkdownCriteria,
    PatternMatchResults,
    ScanningContext,
    ScanRules,
    TextNodeWithOffset,
)
from .nodes import CodeBlockNode

CODE_BLOCK_CRITERIA = MarkdownCriteria(CriteriaType.CODE_BLOCK, CODE_FENCE_PATTERN)


def follows_open_code_block(anchor: TextNodeWithOffset) -> bool:
    """Return True when the anchor's block sits right after an unclosed fence."""
    block = anchor.node.get_parent()
    if block is None:
        return False
    previous = block.get_previous_sibling()
    return isinstance(previous, CodeBlockNode) and previous.is_open


def get_all_markdown_criteria() -> list[MarkdownCriteria]:
    """Build the ordered catalog used by a document scan.

    Returns:
        list[MarkdownCriteria]: Code continuation lines first, then headings
            ``h1`` to ``h6``, quotes, unordered and ordered list items, code
            fences and horizontal rules.
    """
    criteria = [
        MarkdownCriteria(
            CriteriaType.CODE_LINE, CODE_LINE_PATTERN, predicate=follows_open_code_block
        )
    ]
    criteria.extend(
        MarkdownCriteria(CriteriaType.HEADING, pattern, tag=f"h{level}")
        for level, pattern in HEADING_PATTERNS.items()
    )
    criteria.extend(
        [
            MarkdownCriteria(CriteriaType.QUOTE, QUOTE_PATTERN),
            MarkdownCriteria(CriteriaType.UNORDERED_LIST, UNORDERED_LIST_PATTERN),
            MarkdownCriteria(CriteriaType.ORDERED_LIST, ORDERED_LIST_PATTERN),
            CODE_BLOCK_CRITERIA,
            MarkdownCriteria(CriteriaType.HORIZONTAL_RULE, HORIZONTAL_RULE_PATTERN),
        ]
    )
    return criteria


def get_code_block_criteria() -> MarkdownCriteria:
    """Return the fixed criterion used to open and close code fences."""
    return CODE_BLOCK_CRITERIA


def looks_like_code_block_boundary(text: str) -> bool:
    """Return True when `text` is a bare closing fence.

    Examples:
        looks_like_code_block_boundary("```")  # True
        looks_like_code_block_boundary("```python")  # False
    """
    return CLOSING_FENCE_PATTERN.match(text) is not None


def get_pattern_match_results_for_paragraphs(
    criteria: MarkdownCriteria, scanning_context: ScanningContext
) -> PatternMatchResults | None:
    """Evaluate `criteria` against the block currently held by the context.

    Args:
        criteria: Criterion to test.
        scanning_context: Context whose `joined_text` and
            `text_node_with_offset` describe the current paragraph.

    Returns:
        PatternMatchResults | None: Match data, or None when the criterion
            does not apply.

    Raises:
        ValueError: If the context has no anchor or joined text.
    """
    anchor = scanning_context.text_node_with_offset
    joined_text = scanning_context.joined_text
    if anchor is None or joined_text is None:
        raise ValueError("Scanning context has no paragraph to match against")
    return criteria.match(joined_text, anchor)


def default_scan_rules() -> ScanRules:
    """Bundle the catalog, the code fence criterion and the boundary test."""
    return ScanRules(
        criteria=tuple(get_all_markdown_criteria()),
        code_block_criteria=get_code_block_criteria(),
        is_code_block_boundary=looks_like_code_block_boundary,
    )
