"""Data models for the escaper module."""

from dataclasses import dataclass
from typing import Optional

__all__ = ["LiteralStyle"]


@dataclass(frozen=True)
class LiteralStyle:
    """
    String-literal syntax of one host language.

    name               — style identifier, e.g. "java"
    operator           — concatenation operator between line literals
                         ("+" for JVM languages, "" for C juxtaposition)
    indent             — indentation placed before every continuation line
    control_escape     — "unicode" (\\uXXXX) or "octal" (\\ooo) for C0 controls
    extra_escapes      — additional (raw, escaped) pairs, applied after the
                         backslash and quote passes
    max_constant_bytes — class-file limit on a folded constant; None = no limit
    """
    name:               str
    operator:           str                           = "+"
    indent:             str                           = "        "
    control_escape:     str                           = "unicode"
    extra_escapes:      tuple[tuple[str, str], ...]   = ()
    max_constant_bytes: Optional[int]                 = None

    @property
    def separator(self) -> str:
        """Text placed between two consecutive line literals."""
        lead = f" {self.operator}" if self.operator else ""
        return f"{lead}\n{self.indent}"

    def escape_control(self, char: str) -> str:
        """Escape a single control character in this style's notation."""
        if self.control_escape == "octal":
            return f"\\{ord(char):03o}"
        return f"\\u{ord(char):04x}"

    def __str__(self) -> str:
        return f"LiteralStyle({self.name})"
