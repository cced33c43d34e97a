"""Data models for the generator module."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lua_embed.escaper.models import LiteralStyle
from lua_embed.escaper.styles import get_style
from lua_embed.exceptions import ConfigError
from lua_embed.template.renderer import DEFAULT_TEMPLATE_SUFFIX, derive_output_name

__all__ = ["GeneratorOptions", "GenerationJob", "GenerationResult", "DEFAULT_PLACEHOLDER_KEY"]

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_KEY = "code"


@dataclass
class GeneratorOptions:
    """Options shared by every job of one generation run."""
    style:           str  = "java"            # "java" | "kotlin" | "c"
    encoding:        str  = "utf-8"           # used for source, template and output
    template_suffix: str  = DEFAULT_TEMPLATE_SUFFIX
    token_begin:     str  = "@"
    token_end:       str  = "@"
    verify:          bool = True              # evaluate the literal back and compare
    check_syntax:    bool = False             # run `luac -p` on the source first

    def literal_style(self) -> LiteralStyle:
        """Resolve the configured style name; raises ConfigError if unknown."""
        return get_style(self.style)


@dataclass
class GenerationJob:
    """
    One template + one Lua script → one generated file.

    source          — Lua script to embed
    template        — template file, name ending with options.template_suffix
    output_dir      — directory receiving the generated file
    placeholder_key — key whose token receives the literal expression
    """
    source:          Path
    template:        Path
    output_dir:      Path
    placeholder_key: str              = DEFAULT_PLACEHOLDER_KEY
    options:         GeneratorOptions = field(default_factory=GeneratorOptions)

    def __post_init__(self):
        self.source = Path(self.source)
        self.template = Path(self.template)
        self.output_dir = Path(self.output_dir)
        if not self.placeholder_key:
            raise ConfigError("GenerationJob.placeholder_key must not be empty")

    @property
    def output_path(self) -> Path:
        """Where the artifact goes; raises TemplateNameError on a bad template name."""
        name = derive_output_name(self.template.name, self.options.template_suffix)
        return self.output_dir / name

    def __str__(self) -> str:
        return f"GenerationJob({self.source.name} → {self.template.name})"


@dataclass
class GenerationResult:
    """
    Outcome of running one GenerationJob.

    output_path — path of the generated artifact
    written     — False when the artifact on disk was already identical
    size        — artifact size in bytes
    """
    output_path: Path
    written:     bool
    size:        int = 0

    def __str__(self) -> str:
        status = "written" if self.written else "up-to-date"
        return f"GenerationResult({self.output_path}, {status}, {self.size} bytes)"
