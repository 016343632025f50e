"""Mutable document tree used by the autoformatting engine.

The engine only relies on a narrow slice of this module: reading and
replacing the root's children, child and sibling navigation, text content,
and the ``is_*`` type tests. Nodes are plain mutable objects with a single
parent link; attaching a node somewhere else detaches it first.

Node Hierarchy:
Node
├── TextNode            (inline)
├── LineBreakNode       (inline)
├── DecoratorNode       (block without children)
│   └── HorizontalRuleNode
└── ElementNode         (ordered children)
    ├── RootNode        (the document)
    ├── ParagraphNode
    ├── HeadingNode
    ├── QuoteNode
    ├── ListItemNode
    └── CodeBlockNode
"""

from __future__ import annotations

from collections.abc import Iterable

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TYPES = ("bullet", "number")


class Node:
    """Base class for every node in the tree."""

    kind = "node"

    def __init__(self) -> None:
        self._parent: ElementNode | None = None

    def get_parent(self) -> ElementNode | None:
        return self._parent

    def is_attached(self) -> bool:
        """Return True when the node is reachable from a `RootNode`."""
        node: Node | None = self
        while node is not None:
            if isinstance(node, RootNode):
                return True
            node = node._parent
        return False

    def get_index_within_parent(self) -> int:
        parent = self._require_parent()
        for index, child in enumerate(parent._children):
            if child is self:
                return index
        raise ValueError("Node is not among its parent's children")

    def get_previous_sibling(self) -> Node | None:
        if self._parent is None:
            return None
        index = self.get_index_within_parent()
        return self._parent._children[index - 1] if index > 0 else None

    def get_next_sibling(self) -> Node | None:
        if self._parent is None:
            return None
        index = self.get_index_within_parent()
        siblings = self._parent._children
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def remove(self) -> None:
        """Detach the node from its parent. Detached nodes are left as-is."""
        if self._parent is None:
            return
        index = self.get_index_within_parent()
        del self._parent._children[index]
        self._parent = None

    def replace(self, new_node: Node, include_children: bool = False) -> Node:
        """Put `new_node` at this node's position and detach this node.

        Args:
            new_node: Node taking over the position.
            include_children: Move this node's children into `new_node` when
                both are elements.

        Returns:
            Node: `new_node`, for chaining.

        Raises:
            ValueError: If this node has no parent.
        """
        parent = self._require_parent()
        new_node.remove()
        index = self.get_index_within_parent()
        parent._children[index] = new_node
        new_node._parent = parent
        self._parent = None
        if include_children and isinstance(self, ElementNode) and isinstance(new_node, ElementNode):
            new_node.append(*self.get_children())
        return new_node

    def insert_after(self, node: Node) -> Node:
        parent = self._require_parent()
        node.remove()
        index = self.get_index_within_parent()
        parent._children.insert(index + 1, node)
        node._parent = parent
        return node

    def get_text_content(self) -> str:
        return ""

    def _require_parent(self) -> ElementNode:
        if self._parent is None:
            raise ValueError(f"{type(self).__name__} is not attached to a parent")
        return self._parent


class TextNode(Node):
    """Inline run of plain text."""

    kind = "text"

    def __init__(self, text: str = "") -> None:
        super().__init__()
        self.text = text

    def get_text_content(self) -> str:
        return self.text

    def set_text(self, text: str) -> TextNode:
        self.text = text
        return self

    def split_text(self, offset: int) -> tuple[TextNode, ...]:
        """Split this run in two at `offset`.

        This node keeps the text before `offset`; a new node holding the rest
        is inserted right after it when this node has a parent.

        Args:
            offset: Character offset within ``text``.

        Returns:
            tuple[TextNode, ...]: The resulting runs, left to right. Splitting
                at either end leaves the node unchanged and returns it alone.

        Raises:
            ValueError: If `offset` is outside ``[0, len(text)]``.
        """
        if not 0 <= offset <= len(self.text):
            raise ValueError(
                f"Offset {offset} is outside text node of length {len(self.text)}"
            )
        if offset in (0, len(self.text)):
            return (self,)

        rest = TextNode(self.text[offset:])
        self.text = self.text[:offset]
        if self._parent is not None:
            self.insert_after(rest)
        return (self, rest)

    def __repr__(self) -> str:
        return f"TextNode({self.text!r})"


class LineBreakNode(Node):
    """Inline hard line break."""

    kind = "linebreak"

    def get_text_content(self) -> str:
        return "\n"

    def __repr__(self) -> str:
        return "LineBreakNode()"


class DecoratorNode(Node):
    """Block rendered by the host, with no children and no text."""

    kind = "decorator"


class HorizontalRuleNode(DecoratorNode):
    kind = "horizontal-rule"

    def __repr__(self) -> str:
        return "HorizontalRuleNode()"


class ElementNode(Node):
    """Node holding an ordered sequence of children."""

    kind = "element"

    def __init__(self) -> None:
        super().__init__()
        self._children: list[Node] = []

    def append(self, *nodes: Node) -> ElementNode:
        for node in nodes:
            if isinstance(node, RootNode):
                raise ValueError("RootNode cannot be appended to another node")
            node.remove()
            self._children.append(node)
            node._parent = self
        return self

    def get_children(self) -> list[Node]:
        return list(self._children)

    def get_children_size(self) -> int:
        return len(self._children)

    def get_first_child(self) -> Node | None:
        return self._children[0] if self._children else None

    def get_last_child(self) -> Node | None:
        return self._children[-1] if self._children else None

    def clear(self) -> ElementNode:
        for child in self._children:
            child._parent = None
        self._children = []
        return self

    def get_text_content(self) -> str:
        return "".join(child.get_text_content() for child in self._children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_text_content()!r})"


class RootNode(ElementNode):
    """The document: an ordered sequence of top-level blocks."""

    kind = "root"

    def replace_children(self, nodes: Iterable[Node]) -> RootNode:
        self.clear()
        self.append(*nodes)
        return self

    def get_text_content(self) -> str:
        return "\n".join(child.get_text_content() for child in self._children)


class ParagraphNode(ElementNode):
    kind = "paragraph"


class QuoteNode(ElementNode):
    kind = "quote"


class HeadingNode(ElementNode):
    kind = "heading"

    def __init__(self, tag: str = "h1") -> None:
        if tag not in HEADING_TAGS:
            raise ValueError(f"Unsupported heading tag: {tag!r}")
        super().__init__()
        self.tag = tag


class ListItemNode(ElementNode):
    kind = "list-item"

    def __init__(self, list_type: str = "bullet", value: int = 1) -> None:
        if list_type not in LIST_TYPES:
            raise ValueError(f"Unsupported list type: {list_type!r}")
        super().__init__()
        self.list_type = list_type
        self.value = value


class CodeBlockNode(ElementNode):
    """Fenced code block; lines are text runs separated by line breaks.

    Attributes:
        language: Info string from the opening fence, or None.
        is_open: True until the closing fence has been consumed.
    """

    kind = "code"

    def __init__(self, language: str | None = None, is_open: bool = False) -> None:
        super().__init__()
        self.language = language
        self.is_open = is_open
        self._line_count = 0

    def append_line(self, text: str) -> CodeBlockNode:
        if self._line_count:
            self.append(LineBreakNode())
        if text:
            self.append(TextNode(text))
        self._line_count += 1
        return self

    def get_lines(self) -> list[str]:
        if not self._line_count:
            return []
        return self.get_text_content().split("\n")


def create_paragraph_node() -> ParagraphNode:
    return ParagraphNode()


def create_text_node(text: str = "") -> TextNode:
    return TextNode(text)


def create_horizontal_rule_node() -> HorizontalRuleNode:
    return HorizontalRuleNode()


def is_element_node(node: object) -> bool:
    return isinstance(node, ElementNode)


def is_paragraph_node(node: object) -> bool:
    return isinstance(node, ParagraphNode)


def is_text_node(node: object) -> bool:
    return isinstance(node, TextNode)


def is_decorator_node(node: object) -> bool:
    return isinstance(node, DecoratorNode)
