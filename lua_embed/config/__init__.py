"""
config — job files and the explicit build environment.

Public API
──────────
JobFile           — parsed job file
load_job_file     — read a JSON job file
build_options     — validated GeneratorOptions from a mapping
BuildEnvironment  — native SDK library locations
"""

from lua_embed.config.environment import BuildEnvironment
from lua_embed.config.loader import JobFile, build_options, load_job_file, parse_job_file

__all__ = ["JobFile", "load_job_file", "parse_job_file", "build_options", "BuildEnvironment"]
