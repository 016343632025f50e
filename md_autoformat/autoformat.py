"""Scan a document's blocks for markdown shorthand and rewrite them in place."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .criteria import default_scan_rules, get_pattern_match_results_for_paragraphs
from .exceptions import ConvergenceError, InvariantViolationError
from .importer import import_plain_text
from .models import ScanningContext, ScanRules, TextNodeWithOffset
from .nodes import (
    CodeBlockNode,
    ElementNode,
    Node,
    RootNode,
    is_element_node,
    is_paragraph_node,
    is_text_node,
)
from .transforms import HorizontalRuleFactory, transform_text_node_for_paragraphs

logger = logging.getLogger(__name__)

RewriteHook = Callable[[ScanningContext, HorizontalRuleFactory | None], None]


def _interrupts_code_block(block: Node) -> bool:
    # Paragraphs are code lines or the closing fence; an open code block is
    # the fence itself, revisited after a restart.
    if is_paragraph_node(block):
        return False
    return not (isinstance(block, CodeBlockNode) and block.is_open)


def try_convert_block(
    scanning_context: ScanningContext,
    element_node: ElementNode,
    rules: ScanRules,
    rewrite: RewriteHook = transform_text_node_for_paragraphs,
    create_horizontal_rule_node: HorizontalRuleFactory | None = None,
) -> None:
    """Match one block against the code fence rule and the criteria catalog.

    A closing fence inside an open code block is handled first and ends the
    evaluation. Otherwise a non-empty paragraph is probed with every
    paragraph-start criterion in catalog order; each match is recorded on the
    context and handed to `rewrite`. Probing continues through the whole
    catalog after a match.

    Args:
        scanning_context: Context for the current scan; updated in place.
        element_node: Block to evaluate.
        rules: Criteria catalog and code fence collaborators.
        rewrite: Hook performing the structural rewrite for a match.
        create_horizontal_rule_node: Factory passed through to `rewrite`.

    Returns:
        None.

    Raises:
        InvariantViolationError: If a paragraph's first child is not a text node.
    """
    text_content = element_node.get_text_content()

    if scanning_context.is_within_code_block and rules.is_code_block_boundary(text_content):
        scanning_context.markdown_criteria = rules.code_block_criteria
        scanning_context.element_node = element_node
        scanning_context.joined_text = text_content
        first_child = element_node.get_first_child()
        if is_text_node(first_child):
            scanning_context.text_node_with_offset = TextNodeWithOffset(first_child, 0)
        rewrite(scanning_context, create_horizontal_rule_node)
        return

    if not (
        is_paragraph_node(element_node)
        and text_content
        and element_node.get_children_size()
    ):
        return

    for criteria in rules.criteria:
        if not criteria.requires_paragraph_start:
            continue

        first_child = element_node.get_first_child()
        if not is_text_node(first_child):
            raise InvariantViolationError("Expect paragraph containing only text nodes.")

        scanning_context.element_node = element_node
        scanning_context.text_node_with_offset = TextNodeWithOffset(first_child, 0)
        scanning_context.joined_text = element_node.get_text_content()

        pattern_match_results = get_pattern_match_results_for_paragraphs(
            criteria, scanning_context
        )
        if pattern_match_results is not None:
            scanning_context.markdown_criteria = criteria
            scanning_context.pattern_match_results = pattern_match_results
            rewrite(scanning_context, create_horizontal_rule_node)


def autoformat_document(
    document: RootNode,
    rewrite: RewriteHook = transform_text_node_for_paragraphs,
    *,
    rules: ScanRules | None = None,
    create_horizontal_rule_node: HorizontalRuleFactory | None = None,
    max_restarts: int | None = None,
) -> int:
    """Rewrite markdown shorthand in the document's blocks until nothing changes.

    After every block the transient context fields are cleared and the block
    count is read again. When a rewrite inserted or removed blocks, the sweep
    restarts from the same index against the new sequence; blocks before that
    index are already final. A block other than a paragraph ends an
    unclosed code fence.

    Args:
        document: Document to rewrite in place.
        rewrite: Hook performing the structural rewrite for a match.
        rules: Criteria collaborators; defaults to `default_scan_rules()`.
        create_horizontal_rule_node: Factory for horizontal rule blocks.
        max_restarts: Optional cap on restarts. None means unbounded.

    Returns:
        int: Number of restarts the sweep needed.

    Raises:
        ConvergenceError: If the sweep restarts more than `max_restarts` times.
        InvariantViolationError: If a paragraph does not start with a text node.
        ValueError: If `max_restarts` is negative.

    Examples:
        autoformat_document(document, create_horizontal_rule_node=create_horizontal_rule_node)
    """
    if max_restarts is not None and max_restarts < 0:
        raise ValueError("`max_restarts` must be >= 0")

    rules = rules or default_scan_rules()
    scanning_context = ScanningContext()

    done = False
    start_index = 0
    restarts = 0

    while not done:
        done = True

        element_nodes = document.get_children()
        count_of_element_nodes = len(element_nodes)

        for index in range(start_index, count_of_element_nodes):
            element_node = element_nodes[index]

            if scanning_context.is_within_code_block and _interrupts_code_block(element_node):
                scanning_context.is_within_code_block = False
                logger.debug("Block at index %d ends the unclosed code fence", index)

            if is_element_node(element_node):
                try_convert_block(
                    scanning_context,
                    element_node,
                    rules,
                    rewrite,
                    create_horizontal_rule_node,
                )
            # Only is_within_code_block carries over to the next block.
            scanning_context.reset()

            current_count = document.get_children_size()
            if current_count != count_of_element_nodes:
                restarts += 1
                if max_restarts is not None and restarts > max_restarts:
                    raise ConvergenceError(max_restarts)
                logger.debug(
                    "Block count changed from %d to %d at index %d; resuming there",
                    count_of_element_nodes,
                    current_count,
                    index,
                )
                start_index = index
                done = False
                break

    logger.debug("Autoformat converged after %d restart(s)", restarts)
    return restarts


def convert_from_markdown_string(
    text: str,
    document: RootNode | None = None,
    *,
    rules: ScanRules | None = None,
    create_horizontal_rule_node: HorizontalRuleFactory | None = None,
    max_restarts: int | None = None,
) -> RootNode | None:
    """Import `text` one paragraph per line, then autoformat the result.

    Args:
        text: Raw text to convert.
        document: Document to fill; a new `RootNode` when omitted.
        rules: Criteria collaborators; defaults to `default_scan_rules()`.
        create_horizontal_rule_node: Factory for horizontal rule blocks.
        max_restarts: Optional cap on restarts.

    Returns:
        RootNode | None: The converted document, or None for empty text.

    Examples:
        convert_from_markdown_string("# Title\\n- item")
    """
    document = document if document is not None else RootNode()
    if import_plain_text(text, document) is None:
        return None

    autoformat_document(
        document,
        rules=rules,
        create_horizontal_rule_node=create_horizontal_rule_node,
        max_restarts=max_restarts,
    )
    return document
