"""Locates ``model`` blocks inside schema text and splits them into lines.

Model bodies are matched up to the first closing brace, so a ``}`` inside a
default-value expression ends the block early.  Only the constructs needed for
field extraction are recognised; the document is never validated as a whole.
"""

from __future__ import annotations

import re
from collections.abc import Iterator


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_MODEL_NAME_PATTERN = re.compile(r"\bmodel\s+(\w+)\s*\{")
_DECLARATION_HEAD = re.compile(r"\w+[ \t]+\w+(?:\?|\[\])?")
_ANNOTATION_HEAD = re.compile(r"[ \t]*@{1,2}[\w.]+")
_BLOCK_ATTRIBUTE_PREFIX = "@@"
_COMMENT_PREFIX = "//"


def _header_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"\bmodel\s+{re.escape(name)}\s*\{{", re.IGNORECASE)


def _block_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"\bmodel\s+{re.escape(name)}\s*\{{([^}}]*)\}}", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Model lookup
# ---------------------------------------------------------------------------

def has_model(schema_text: str, name: str) -> bool:
    """Return ``True`` if a ``model <name> {`` header exists (case-insensitive)."""
    if not name:
        return False
    return _header_pattern(name).search(schema_text) is not None


def extract_model_body(schema_text: str, name: str) -> str | None:
    """Return the raw interior text of model *name*, or ``None`` if absent.

    The lookup ignores case; the returned body keeps the original casing.
    """
    if not name:
        return None
    match = _block_pattern(name).search(schema_text)
    if match is None:
        return None
    return match.group(1)


def list_models(schema_text: str) -> list[str]:
    """Return every declared model name in declaration order."""
    names: list[str] = []
    for match in _MODEL_NAME_PATTERN.finditer(schema_text):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


# ---------------------------------------------------------------------------
# Line tokenizing
# ---------------------------------------------------------------------------

def strip_comment(line: str) -> str:
    """Remove a trailing ``//`` comment that is not inside a string literal."""
    in_string = False
    previous = ""
    for position, char in enumerate(line):
        if char == '"' and previous != "\\":
            in_string = not in_string
        elif char == "/" and previous == "/" and not in_string:
            return line[: position - 1].rstrip()
        previous = char
    return line


def matching_paren(text: str, open_paren: int) -> int | None:
    """Index of the ``)`` closing ``text[open_paren]``, or ``None`` if unbalanced."""
    depth = 0
    in_string = False
    for position in range(open_paren, len(text)):
        char = text[position]
        if char == '"' and text[position - 1] != "\\":
            in_string = not in_string
        elif in_string:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return position
    return None


def split_declarations(line: str) -> list[str]:
    """Split a line holding several field declarations into one per field.

    ``title String categoryId String`` yields ``["title String",
    "categoryId String"]``.  Each declaration is a name, a type with an
    optional modifier, then any number of ``@annotation(...)`` calls.  Text
    that does not start a declaration is returned as-is for the classifier
    to reject.
    """
    parts: list[str] = []
    position = 0
    length = len(line)

    while position < length:
        while position < length and line[position].isspace():
            position += 1
        if position >= length:
            break

        head = _DECLARATION_HEAD.match(line, position)
        if head is None:
            parts.append(line[position:].strip())
            break

        end = head.end()
        while True:
            annotation = _ANNOTATION_HEAD.match(line, end)
            if annotation is None:
                break
            end = annotation.end()
            if end < length and line[end] == "(":
                close = matching_paren(line, end)
                if close is None:
                    end = length
                    break
                end = close + 1

        if end < length and not line[end].isspace():
            # e.g. ``data Unsupported("x")``: leave it whole for the classifier
            parts.append(line[position:].strip())
            break

        parts.append(line[position:end].strip())
        position = end

    return parts


def iter_field_lines(body: str) -> Iterator[str]:
    """Yield candidate field declarations from a model body.

    Blank lines, comment-only lines and block-level ``@@`` attributes are
    skipped.  Trailing comments are removed, a line carrying several
    declarations is split, and each declaration is trimmed.
    """
    for raw_line in body.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIX):
            continue
        if line.startswith(_BLOCK_ATTRIBUTE_PREFIX):
            continue
        line = strip_comment(line)
        for declaration in split_declarations(line):
            if declaration and not declaration.startswith(_BLOCK_ATTRIBUTE_PREFIX):
                yield declaration
