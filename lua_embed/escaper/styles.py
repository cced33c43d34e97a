"""Built-in literal styles and the lookup function for them."""

from __future__ import annotations

from lua_embed.exceptions import ConfigError

from .models import LiteralStyle

__all__ = ["JAVA", "KOTLIN", "C", "get_style", "style_names"]

# javac rejects a constant whose modified UTF-8 encoding exceeds this
_JVM_CONSTANT_LIMIT = 65535

JAVA = LiteralStyle(
    name="java",
    operator="+",
    max_constant_bytes=_JVM_CONSTANT_LIMIT,
)

KOTLIN = LiteralStyle(
    name="kotlin",
    operator="+",
    extra_escapes=(("$", "\\$"),),
    max_constant_bytes=_JVM_CONSTANT_LIMIT,
)

C = LiteralStyle(
    name="c",
    operator="",
    indent="    ",
    control_escape="octal",
    extra_escapes=(("?", "\\?"),),   # no trigraphs such as ??=
)

_STYLE_MAP: dict[str, LiteralStyle] = {
    "java":   JAVA,
    "kotlin": KOTLIN,
    "c":      C,
}


def style_names() -> list[str]:
    """Return the names accepted by get_style(), sorted."""
    return sorted(_STYLE_MAP)


def get_style(name: str) -> LiteralStyle:
    """
    Return the built-in LiteralStyle called *name* (case-insensitive).

    Raises
    ------
    ConfigError if no such style exists.
    """
    style = _STYLE_MAP.get(name.lower())
    if style is None:
        raise ConfigError(
            f"Unknown literal style {name!r}; expected one of {style_names()}"
        )
    return style
