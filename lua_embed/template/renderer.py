"""
TemplateRenderer — substitutes placeholder tokens in a template's text.

Tokens follow the Ant/Gradle ReplaceTokens convention: key ``code`` is
written ``@code@`` in the template. Begin and end markers are configurable.

Substitution is a single regex pass, so replacement text that happens to
contain a token is never substituted again.
"""

from __future__ import annotations

import logging
import re

from lua_embed.exceptions import ConfigError, TemplateMismatchError, TemplateNameError

__all__ = ["TemplateRenderer", "derive_output_name", "DEFAULT_TEMPLATE_SUFFIX"]

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_SUFFIX = ".template"


class TemplateRenderer:
    """
    Render template text against a placeholder → replacement mapping.

    Usage::

        renderer = TemplateRenderer()
        java_src = renderer.render(template_text, {"code": literal})
    """

    def __init__(self, token_begin: str = "@", token_end: str = "@") -> None:
        if not token_begin or not token_end:
            raise ConfigError("Template token markers must not be empty")
        self.token_begin = token_begin
        self.token_end = token_end

    def token(self, key: str) -> str:
        """Return the placeholder token for *key*, e.g. ``@code@``."""
        return f"{self.token_begin}{key}{self.token_end}"

    def missing_keys(self, text: str, keys) -> list[str]:
        """Return the keys whose token does not appear in *text*."""
        return [key for key in keys if self.token(key) not in text]

    def render(self, text: str, mapping: dict[str, str]) -> str:
        """
        Substitute every key of *mapping* into *text*.

        Text outside the tokens, and tokens for keys not in *mapping*, are
        passed through unchanged.

        Raises
        ------
        TemplateMismatchError if any key's token is absent from *text*.
        """
        if not mapping:
            return text

        missing = self.missing_keys(text, mapping)
        if missing:
            tokens = ", ".join(self.token(key) for key in missing)
            raise TemplateMismatchError(
                f"Template does not contain placeholder(s) {tokens}; "
                "the template and generator versions do not match"
            )

        # Longest keys first so a key that prefixes another cannot shadow it
        alternatives = "|".join(
            re.escape(key) for key in sorted(mapping, key=len, reverse=True)
        )
        pattern = re.compile(
            f"{re.escape(self.token_begin)}({alternatives}){re.escape(self.token_end)}"
        )
        rendered, count = pattern.subn(lambda m: mapping[m.group(1)], text)
        logger.debug("Substituted %d placeholder occurrence(s)", count)
        return rendered


def derive_output_name(template_name: str, suffix: str = DEFAULT_TEMPLATE_SUFFIX) -> str:
    """
    Strip the template *suffix* from *template_name*.

    ``Foo.java.template`` → ``Foo.java``.

    Raises
    ------
    TemplateNameError if the name does not end with *suffix*, or is nothing
    but the suffix.
    """
    if not suffix:
        raise TemplateNameError("Template suffix must not be empty")
    if not template_name.endswith(suffix):
        raise TemplateNameError(
            f"Template {template_name!r} does not end with {suffix!r}"
        )
    output_name = template_name[: -len(suffix)]
    if not output_name:
        raise TemplateNameError(
            f"Template {template_name!r} has no name left after removing {suffix!r}"
        )
    return output_name
