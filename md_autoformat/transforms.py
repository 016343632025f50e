"""Block rewrites performed when a criterion matches.

Every rewrite here leaves the blocks before the current one alone: it
replaces the current block in place, removes it, or removes blocks after it.
The scan driver resumes from the current index after a count change and
relies on this.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .criteria import looks_like_code_block_boundary
from .models import CriteriaType, MarkdownCriteria, PatternMatchResults, ScanningContext
from .nodes import (
    CodeBlockNode,
    DecoratorNode,
    ElementNode,
    HeadingNode,
    ListItemNode,
    QuoteNode,
    create_text_node,
    is_paragraph_node,
    is_text_node,
)

logger = logging.getLogger(__name__)

HorizontalRuleFactory = Callable[[], DecoratorNode]


def transform_text_node_for_paragraphs(
    scanning_context: ScanningContext,
    create_horizontal_rule_node: HorizontalRuleFactory | None = None,
) -> None:
    """Rewrite the context's current block according to its matched criterion.

    Args:
        scanning_context: Context holding the matched criterion, the match
            results, the anchor, and the block being evaluated.
        create_horizontal_rule_node: Factory for horizontal rule blocks. When
            omitted, horizontal rule shorthand is left as plain text.

    Returns:
        None.

    Raises:
        ValueError: If the context holds no criterion or no block.

    Examples:
        transform_text_node_for_paragraphs(context, create_horizontal_rule_node)
    """
    criteria = scanning_context.markdown_criteria
    element = scanning_context.element_node
    if criteria is None or element is None:
        raise ValueError("Scanning context has no matched criterion to apply")

    # An earlier criterion in the catalog already rewrote this block.
    if not element.is_attached():
        logger.debug("Skipping %s rewrite of a detached block", criteria.criteria_type.name)
        return

    criteria_type = criteria.criteria_type
    if criteria_type is CriteriaType.CODE_BLOCK:
        _transform_code_fence(scanning_context, element)
        return
    if criteria_type is CriteriaType.CODE_LINE:
        _append_code_line(scanning_context, element)
        return

    if scanning_context.is_within_code_block:
        logger.debug("Skipping %s rewrite inside a code block", criteria_type.name)
        return

    if criteria_type is CriteriaType.HORIZONTAL_RULE:
        if create_horizontal_rule_node is None:
            logger.debug("No horizontal rule factory; leaving paragraph unchanged")
            return
        element.replace(create_horizontal_rule_node())
        return

    results = scanning_context.pattern_match_results
    if results is None:
        raise ValueError(f"{criteria_type.name} rewrite requires pattern match results")

    new_block = _create_block(criteria, results)
    _move_inline_content(scanning_context, results, new_block)
    element.replace(new_block)
    logger.debug("Rewrote paragraph as %s", new_block.kind)


def _create_block(criteria: MarkdownCriteria, results: PatternMatchResults) -> ElementNode:
    criteria_type = criteria.criteria_type
    if criteria_type is CriteriaType.HEADING:
        return HeadingNode(criteria.tag or "h1")
    if criteria_type is CriteriaType.QUOTE:
        return QuoteNode()
    if criteria_type is CriteriaType.UNORDERED_LIST:
        return ListItemNode("bullet")
    if criteria_type is CriteriaType.ORDERED_LIST:
        return ListItemNode("number", int(results.group(2)))
    raise ValueError(f"No block rewrite for {criteria_type.name}")


def _move_inline_content(
    scanning_context: ScanningContext, results: PatternMatchResults, new_block: ElementNode
) -> None:
    """Move the paragraph's inline content, minus the matched prefix, into `new_block`.

    The anchor's text node is copied rather than moved so the detached
    paragraph keeps a text run as its first child.
    """
    anchor = scanning_context.text_node_with_offset
    element = scanning_context.element_node
    if anchor is None or element is None:
        raise ValueError("Scanning context has no anchor to rewrite from")

    to_consume = len(results.match_text)
    anchor_text = anchor.node.text
    tail = anchor_text[anchor.offset :]
    consumed = min(to_consume, len(tail))
    to_consume -= consumed

    leading = anchor_text[: anchor.offset] + tail[consumed:]
    if leading:
        new_block.append(create_text_node(leading))

    for child in element.get_children():
        if child is anchor.node:
            continue
        if to_consume and is_text_node(child):
            taken = min(to_consume, len(child.text))
            to_consume -= taken
            if taken == len(child.text):
                continue
            if taken:
                _, child = child.split_text(taken)
        new_block.append(child)


def _transform_code_fence(scanning_context: ScanningContext, element: ElementNode) -> None:
    if scanning_context.is_within_code_block:
        _close_code_block(scanning_context, element)
        return

    results = scanning_context.pattern_match_results
    language = results.group(1) if results is not None and results.group(1) else None
    code_block = CodeBlockNode(language, is_open=True)
    element.replace(code_block)
    scanning_context.is_within_code_block = True
    _absorb_empty_lines(code_block)
    logger.debug("Opened code block (language=%s)", language)


def _append_code_line(scanning_context: ScanningContext, element: ElementNode) -> None:
    code_block = element.get_previous_sibling()
    if not isinstance(code_block, CodeBlockNode) or not code_block.is_open:
        logger.debug("Skipping code line: no open code block precedes it")
        return

    text = element.get_text_content()
    if looks_like_code_block_boundary(text):
        _close_code_block(scanning_context, element)
        return

    code_block.append_line(text)
    element.remove()
    _absorb_empty_lines(code_block)


def _close_code_block(scanning_context: ScanningContext, fence: ElementNode) -> None:
    sibling = fence.get_previous_sibling()
    while sibling is not None:
        if isinstance(sibling, CodeBlockNode) and sibling.is_open:
            sibling.is_open = False
            break
        sibling = sibling.get_previous_sibling()
    else:
        logger.debug("Closing fence without an open code block")

    fence.remove()
    scanning_context.is_within_code_block = False


def _absorb_empty_lines(code_block: CodeBlockNode) -> None:
    sibling = code_block.get_next_sibling()
    while is_paragraph_node(sibling) and not sibling.get_text_content():
        next_sibling = sibling.get_next_sibling()
        code_block.append_line("")
        sibling.remove()
        sibling = next_sibling
