"""
md-autoformat: turn plain text into a structured document, then rewrite
markdown shorthand (headings, list items, quotes, code fences, rules) into
structured blocks.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-autoformat notes.md

Library Usage:
    from md_autoformat import RootNode, autoformat_document, import_plain_text

    document = RootNode()
    import_plain_text("# Title\\nplain text\\n- item", document)
    autoformat_document(document)
"""

from .autoformat import autoformat_document, convert_from_markdown_string, try_convert_block
from .criteria import (
    default_scan_rules,
    get_all_markdown_criteria,
    get_code_block_criteria,
    looks_like_code_block_boundary,
)
from .exceptions import (
    AutoformatError,
    ConvergenceError,
    InputError,
    InvariantViolationError,
    LineTooLongError,
)
from .importer import import_plain_text
from .models import (
    CriteriaType,
    MarkdownCriteria,
    PatternMatchResults,
    ScanningContext,
    ScanRules,
    TextNodeWithOffset,
)
from .nodes import RootNode, create_horizontal_rule_node
from .outline import document_to_dict, render_outline
from .transforms import transform_text_node_for_paragraphs

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "import_plain_text",
    "autoformat_document",
    "try_convert_block",
    "convert_from_markdown_string",
    "transform_text_node_for_paragraphs",
    # Criteria catalog
    "get_all_markdown_criteria",
    "get_code_block_criteria",
    "looks_like_code_block_boundary",
    "default_scan_rules",
    # Data models
    "RootNode",
    "create_horizontal_rule_node",
    "CriteriaType",
    "MarkdownCriteria",
    "PatternMatchResults",
    "ScanningContext",
    "ScanRules",
    "TextNodeWithOffset",
    # Utilities
    "render_outline",
    "document_to_dict",
    # Exceptions
    "AutoformatError",
    "ConvergenceError",
    "InputError",
    "InvariantViolationError",
    "LineTooLongError",
    # Version
    "__version__",
]
