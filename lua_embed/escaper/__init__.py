"""
escaper — Lua text ⇄ host-language string-literal expressions.

Public API
──────────
LiteralStyle                 — literal syntax of one host language
JAVA / KOTLIN / C            — built-in styles
get_style                    — look a style up by name
to_literal_expression        — text → literal expression
evaluate_literal_expression  — literal expression → text
"""

from lua_embed.escaper.models import LiteralStyle
from lua_embed.escaper.styles import C, JAVA, KOTLIN, get_style, style_names
from lua_embed.escaper.literal import (
    escape_segment,
    evaluate_literal_expression,
    to_literal_expression,
)

__all__ = [
    "LiteralStyle",
    "JAVA",
    "KOTLIN",
    "C",
    "get_style",
    "style_names",
    "escape_segment",
    "to_literal_expression",
    "evaluate_literal_expression",
]
