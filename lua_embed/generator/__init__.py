"""
generator — the Lua → generated-source build step.

Public API
──────────
GeneratorOptions   — style / encoding / token / check settings
GenerationJob      — one (source, template, output_dir, key) run
GenerationResult   — outcome of a run
generate           — one-call entry point
run_job / run_jobs — execute prepared jobs
check_up_to_date   — compare the artifact on disk with a fresh render
LuaSyntaxChecker   — optional `luac -p` check
"""

from lua_embed.generator.models import (
    DEFAULT_PLACEHOLDER_KEY,
    GenerationJob,
    GenerationResult,
    GeneratorOptions,
)
from lua_embed.generator.syntax import LuaSyntaxChecker
from lua_embed.generator.task import (
    check_up_to_date,
    generate,
    render_job,
    run_job,
    run_jobs,
    stale_outputs,
)

__all__ = [
    "DEFAULT_PLACEHOLDER_KEY",
    "GeneratorOptions",
    "GenerationJob",
    "GenerationResult",
    "LuaSyntaxChecker",
    "generate",
    "render_job",
    "run_job",
    "run_jobs",
    "check_up_to_date",
    "stale_outputs",
]
