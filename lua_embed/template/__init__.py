"""
template — placeholder substitution and output-name derivation.

Public API
──────────
TemplateRenderer    — substitutes @key@ tokens
derive_output_name  — "Foo.java.template" → "Foo.java"
"""

from lua_embed.template.renderer import (
    DEFAULT_TEMPLATE_SUFFIX,
    TemplateRenderer,
    derive_output_name,
)

__all__ = ["TemplateRenderer", "derive_output_name", "DEFAULT_TEMPLATE_SUFFIX"]
