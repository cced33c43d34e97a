"""
Project-wide custom exception hierarchy.
All modules raise subclasses of EmbedBaseError — never bare Exception.
"""

__all__ = [
    "EmbedBaseError",
    "ConfigError",
    "MissingInputError",
    "TemplateError",
    "TemplateMismatchError",
    "TemplateNameError",
    "EscapeError",
    "LiteralSyntaxError",
    "RoundTripError",
    "LuaSyntaxError",
    "WriteFailureError",
]


class EmbedBaseError(Exception):
    """Root exception for all lua-embed errors."""


# ── Configuration ─────────────────────────────────────────────────────────────

class ConfigError(EmbedBaseError):
    """Raised on an invalid job file, unknown literal style or clashing outputs."""


# ── Inputs ────────────────────────────────────────────────────────────────────

class MissingInputError(EmbedBaseError):
    """Raised when the Lua source or the template cannot be read."""


# ── Template ──────────────────────────────────────────────────────────────────

class TemplateError(EmbedBaseError):
    """Base class for template-related errors."""


class TemplateMismatchError(TemplateError):
    """Raised when an expected placeholder token is absent from the template."""


class TemplateNameError(TemplateError):
    """Raised when a template file name does not end with the template suffix."""


# ── Escaping ──────────────────────────────────────────────────────────────────

class EscapeError(EmbedBaseError):
    """Base class for literal escaping errors."""


class LiteralSyntaxError(EscapeError):
    """Raised when a literal expression cannot be parsed back into text."""


class RoundTripError(EscapeError):
    """Raised when an escaped literal does not evaluate back to the source text."""


class LuaSyntaxError(EmbedBaseError):
    """Raised when `luac -p` rejects the Lua source."""


# ── Output ────────────────────────────────────────────────────────────────────

class WriteFailureError(EmbedBaseError):
    """Raised when the output directory or the generated file cannot be written."""
