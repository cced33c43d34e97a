"""
cli — command-line interface for lua-embed.

Entry points
────────────
  python -m lua_embed   (via lua_embed/__main__.py)
  lua-embed             (via pyproject.toml [project.scripts])

Subcommands: generate | run | check | paths
"""

from lua_embed.cli.main import build_parser, cmd_check, cmd_generate, cmd_paths, cmd_run, main

__all__ = ["build_parser", "cmd_generate", "cmd_run", "cmd_check", "cmd_paths", "main"]
