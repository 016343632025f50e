"""Data models for md-autoformat."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto

from .nodes import ElementNode, TextNode


class CriteriaType(Enum):
    """Kinds of block rewrite a criterion can request.

    Attributes:
        HEADING: ``#`` to ``######`` prefixes.
        QUOTE: ``>`` prefix.
        UNORDERED_LIST: ``-``, ``*`` or ``+`` bullet.
        ORDERED_LIST: ``1.`` style number.
        CODE_BLOCK: Opening or closing code fence.
        CODE_LINE: Line inside an open code fence.
        HORIZONTAL_RULE: ``***``, ``---`` or ``___`` on its own.
    """

    HEADING = auto()
    QUOTE = auto()
    UNORDERED_LIST = auto()
    ORDERED_LIST = auto()
    CODE_BLOCK = auto()
    CODE_LINE = auto()
    HORIZONTAL_RULE = auto()


@dataclass
class TextNodeWithOffset:
    """Anchor into a single text node's own string.

    Attributes:
        node: Text node the anchor points into.
        offset: Character offset within ``node.text``.
    """

    node: TextNode
    offset: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.offset <= len(self.node.text):
            raise ValueError(
                f"Offset {self.offset} is outside text node of length {len(self.node.text)}"
            )


@dataclass(frozen=True)
class CaptureGroup:
    text: str
    offset: int


@dataclass(frozen=True)
class PatternMatchResults:
    """Capture groups produced by a successful criterion match.

    Group 0 is the whole match. An empty ``match_text`` is still a match;
    the absence of a match is represented by None, never by this class.
    """

    capture_groups: tuple[CaptureGroup, ...]

    @property
    def match_text(self) -> str:
        return self.capture_groups[0].text

    def group(self, index: int) -> str:
        return self.capture_groups[index].text


@dataclass(frozen=True)
class MarkdownCriteria:
    """One markdown shorthand rule in the catalog.

    Attributes:
        criteria_type: Rewrite to perform when the rule matches.
        pattern: Regular expression tested against the paragraph text.
        requires_paragraph_start: Whether the pattern is anchored at the start
            of a paragraph. Only these criteria take part in a document scan.
        tag: Extra rewrite parameter, such as the heading tag.
        predicate: Optional extra test on the anchor; the match is dropped
            when it returns False.
    """

    criteria_type: CriteriaType
    pattern: re.Pattern[str]
    requires_paragraph_start: bool = True
    tag: str | None = None
    predicate: Callable[[TextNodeWithOffset], bool] | None = field(default=None, compare=False)

    def match(
        self, joined_text: str, anchor: TextNodeWithOffset
    ) -> PatternMatchResults | None:
        """Test the rule against a paragraph's text.

        Args:
            joined_text: Text content of the whole paragraph.
            anchor: First text node of the paragraph and the offset matching
                starts from.

        Returns:
            PatternMatchResults | None: Capture groups with offsets into
                `joined_text`, or None when the rule does not apply.

        Examples:
            criteria.match("# Title", TextNodeWithOffset(text_node, 0))
        """
        if self.predicate is not None and not self.predicate(anchor):
            return None

        regex_match = self.pattern.match(joined_text, anchor.offset)
        if regex_match is None:
            return None

        groups = [CaptureGroup(regex_match.group(0), regex_match.start())]
        for index in range(1, (self.pattern.groups or 0) + 1):
            text = regex_match.group(index)
            groups.append(
                CaptureGroup(text or "", regex_match.start(index) if text is not None else -1)
            )
        return PatternMatchResults(tuple(groups))


@dataclass
class ScanningContext:
    """Mutable record carried through one document scan.

    Only `is_within_code_block` survives from one block to the next; every
    other field describes the block currently being evaluated and is cleared
    by `reset`.

    Attributes:
        is_within_code_block: True between an opening and a closing fence.
        markdown_criteria: Criterion that matched the current block.
        pattern_match_results: Match data for `markdown_criteria`.
        text_node_with_offset: Anchor where a rewrite starts consuming text.
        joined_text: Full text content of the current block.
        element_node: Block currently being evaluated.
    """

    is_within_code_block: bool = False
    markdown_criteria: MarkdownCriteria | None = None
    pattern_match_results: PatternMatchResults | None = None
    text_node_with_offset: TextNodeWithOffset | None = None
    joined_text: str | None = None
    element_node: ElementNode | None = None

    def reset(self) -> None:
        self.markdown_criteria = None
        self.pattern_match_results = None
        self.text_node_with_offset = None
        self.joined_text = None
        self.element_node = None


@dataclass(frozen=True)
class ScanRules:
    """Criteria collaborators injected into a document scan.

    Attributes:
        criteria: Ordered catalog; order decides which rule is tried first.
        code_block_criteria: Fixed criterion used for closing fences.
        is_code_block_boundary: Predicate telling whether a block's text
            closes an open fence.
    """

    criteria: tuple[MarkdownCriteria, ...]
    code_block_criteria: MarkdownCriteria
    is_code_block_boundary: Callable[[str], bool]
