"""Constants used across the md-autoformat package."""

from __future__ import annotations

import re

from .config import AutoformatConfig

DEFAULT_CONFIG = AutoformatConfig()

# Paragraph-start shorthand
HEADING_PATTERNS = {
    level: re.compile(rf"^({'#' * level}) ") for level in range(1, 7)
}
QUOTE_PATTERN = re.compile(r"^(>) ")
UNORDERED_LIST_PATTERN = re.compile(r"^(\s{0,10})([-*+]) ")
ORDERED_LIST_PATTERN = re.compile(r"^(\s{0,10})(\d{1,9})\. ")
HORIZONTAL_RULE_PATTERN = re.compile(r"^(?:\*\*\*|---|___)[ \t]*$")
CODE_LINE_PATTERN = re.compile(r"^(.*)$", re.DOTALL)

# Code fences; only a bare fence closes an open block
CODE_FENCE_PATTERN = re.compile(r"^```([\w+#.-]*)[ \t]*$")
CLOSING_FENCE_PATTERN = re.compile(r"^```[ \t]*$")

# Input limits and file handling
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length
TEXT_EXTENSIONS = (".md", ".markdown", ".txt", ".text")
