r"""
Escaping transformation — Lua source text to a host-language literal expression.

Output shape (java style)
─────────────────────────
  "local x = 1\n" +
          "print(\"hi\\n\")\n"

One literal per source line, each keeping its own line break as an escape,
joined by the style's concatenation operator. Evaluating the expression
yields the original text exactly.

Escape order
────────────
  1. backslash   \  → \\      (must run first)
  2. quote       "  → \"
  3. style extras     (kotlin: $ → \$, c: ? → \? against trigraphs)
  4. line breaks \n → \n, \r → \r
  5. other C0 controls → \uXXXX (JVM) or \ooo (C); tab is kept raw
"""

from __future__ import annotations

import logging
import re

from lua_embed.exceptions import LiteralSyntaxError

from .models import LiteralStyle
from .styles import JAVA

__all__ = [
    "escape_segment",
    "split_lines",
    "to_literal_expression",
    "evaluate_literal_expression",
    "constant_size",
]

logger = logging.getLogger(__name__)

# C0 controls and DEL, minus tab / LF / CR which are handled explicitly
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_SIMPLE_ESCAPES = {
    "n":  "\n",
    "r":  "\r",
    "t":  "\t",
    "b":  "\b",
    "f":  "\f",
    '"':  '"',
    "'":  "'",
    "\\": "\\",
}

_HEX_DIGITS   = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")


# ── Escaping ──────────────────────────────────────────────────────────────────

def escape_segment(text: str, style: LiteralStyle = JAVA) -> str:
    """Escape *text* so it can sit between the quotes of one literal."""
    out = text.replace("\\", "\\\\").replace('"', '\\"')
    for raw, escaped in style.extra_escapes:
        out = out.replace(raw, escaped)
    out = out.replace("\n", "\\n").replace("\r", "\\r")
    return _CONTROL_RE.sub(lambda m: style.escape_control(m.group()), out)


def split_lines(text: str) -> list[str]:
    """
    Split *text* after every LF, keeping the LF on its line.

    Only LF separates lines; a lone CR stays inside its line so mixed line
    endings survive. A trailing LF does not produce an empty last line, and
    empty text yields a single empty line.
    """
    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines or [""]


def to_literal_expression(text: str, style: LiteralStyle = JAVA) -> str:
    """
    Convert *text* into one literal expression for *style*.

    Returns ``""`` for empty text. Logs a warning when the folded constant
    would exceed the style's class-file limit.
    """
    literals = [f'"{escape_segment(line, style)}"' for line in split_lines(text)]

    if style.max_constant_bytes is not None:
        size = constant_size(text)
        if size > style.max_constant_bytes:
            logger.warning(
                "Embedded script is %d bytes; %s constants are limited to %d bytes",
                size, style.name, style.max_constant_bytes,
            )

    return style.separator.join(literals)


def constant_size(text: str) -> int:
    """Length of *text* in modified UTF-8, the JVM constant-pool encoding."""
    size = 0
    for char in text:
        code = ord(char)
        if 0 < code < 0x80:
            size += 1
        elif code < 0x800:
            size += 2
        elif code < 0x10000:
            size += 3
        else:
            size += 6   # stored as a surrogate pair
    return size


# ── Evaluation ────────────────────────────────────────────────────────────────

def evaluate_literal_expression(expression: str, style: LiteralStyle = JAVA) -> str:
    """
    Parse a concatenation of string literals and return its value.

    The inverse of to_literal_expression(); used for the round-trip check.

    Raises
    ------
    LiteralSyntaxError if *expression* is not a well-formed concatenation.
    """
    parts: list[str] = []
    pos = _skip_space(expression, 0)

    while pos < len(expression):
        if parts and style.operator:
            if not expression.startswith(style.operator, pos):
                raise LiteralSyntaxError(
                    f"Expected {style.operator!r} at offset {pos} of literal expression"
                )
            pos = _skip_space(expression, pos + len(style.operator))

        if pos >= len(expression) or expression[pos] != '"':
            raise LiteralSyntaxError(f"Expected string literal at offset {pos}")

        value, pos = _read_literal(expression, pos + 1, style)
        parts.append(value)
        pos = _skip_space(expression, pos)

    if not parts:
        raise LiteralSyntaxError("Literal expression is empty")
    return "".join(parts)


def _skip_space(expression: str, pos: int) -> int:
    while pos < len(expression) and expression[pos] in " \t\r\n":
        pos += 1
    return pos


def _read_literal(expression: str, pos: int, style: LiteralStyle) -> tuple[str, int]:
    """Read one literal body starting after its opening quote."""
    extras = {escaped[1:]: raw for raw, escaped in style.extra_escapes}
    out: list[str] = []
    end = len(expression)

    while pos < end:
        char = expression[pos]
        if char == '"':
            return "".join(out), pos + 1
        if char in "\r\n":
            raise LiteralSyntaxError(f"Unterminated string literal at offset {pos}")
        if char != "\\":
            out.append(char)
            pos += 1
            continue

        if pos + 1 >= end:
            break
        marker = expression[pos + 1]
        if marker in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[marker])
            pos += 2
        elif marker in extras:
            out.append(extras[marker])
            pos += 2
        elif marker == "u" and style.control_escape == "unicode":
            digits = expression[pos + 2:pos + 6]
            if len(digits) != 4 or not set(digits) <= _HEX_DIGITS:
                raise LiteralSyntaxError(f"Bad unicode escape at offset {pos}")
            out.append(chr(int(digits, 16)))
            pos += 6
        elif marker in _OCTAL_DIGITS:
            stop = pos + 1
            while stop < min(pos + 4, end) and expression[stop] in _OCTAL_DIGITS:
                stop += 1
            out.append(chr(int(expression[pos + 1:stop], 8)))
            pos = stop
        else:
            raise LiteralSyntaxError(
                f"Unknown escape sequence \\{marker} at offset {pos}"
            )

    raise LiteralSyntaxError("Unterminated string literal at end of expression")
