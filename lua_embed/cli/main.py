"""
CLI entry point for lua-embed.

Usage
─────
  # Embed one script into one template
  python -m lua_embed generate \\
      --source lua/init.lua \\
      --template templates/CoronaLua.java.template \\
      --output-dir build/generated/source/lua

  # Run every job of a build
  python -m lua_embed run --config lua-embed.json

  # Exit status 1 if any generated file is stale
  python -m lua_embed check --config lua-embed.json

  # Show where the prebuilt native SDK libraries are expected
  python -m lua_embed paths --home /Users/dev
  python -m lua_embed paths --config lua-embed.json

Subcommands are implemented as standalone functions (cmd_generate, cmd_run,
cmd_check, cmd_paths) so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from lua_embed.config import BuildEnvironment, build_options, load_job_file
from lua_embed.escaper import style_names
from lua_embed.exceptions import EmbedBaseError
from lua_embed.generator import (
    DEFAULT_PLACEHOLDER_KEY,
    GenerationResult,
    generate,
    run_jobs,
    stale_outputs,
)
from lua_embed.template import DEFAULT_TEMPLATE_SUFFIX

__all__ = ["build_parser", "cmd_generate", "cmd_run", "cmd_check", "cmd_paths", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: generate | run | check | paths
    """
    parser = argparse.ArgumentParser(
        prog="lua-embed",
        description="Embed Lua scripts into generated source files as string literals",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── generate ──────────────────────────────────────────────────────────
    gen = sub.add_parser("generate", help="Embed one Lua script into one template")
    gen.add_argument("--source", required=True, metavar="PATH", help="Lua script to embed")
    gen.add_argument(
        "--template",
        required=True,
        metavar="PATH",
        help=f"Template file (name must end with {DEFAULT_TEMPLATE_SUFFIX!r} by default)",
    )
    gen.add_argument(
        "--output-dir",
        required=True,
        dest="output_dir",
        metavar="DIR",
        help="Directory for the generated file (created if missing)",
    )
    gen.add_argument(
        "--key",
        default=DEFAULT_PLACEHOLDER_KEY,
        metavar="KEY",
        help=f"Placeholder key; the template token is @KEY@ (default: {DEFAULT_PLACEHOLDER_KEY})",
    )
    gen.add_argument(
        "--style",
        choices=style_names(),
        default="java",
        help="Host-language literal style (default: java)",
    )
    gen.add_argument("--encoding", default="utf-8", help="Text encoding (default: utf-8)")
    gen.add_argument(
        "--suffix",
        default=DEFAULT_TEMPLATE_SUFFIX,
        metavar="SUFFIX",
        help=f"Template suffix stripped from the output name (default: {DEFAULT_TEMPLATE_SUFFIX})",
    )
    gen.add_argument(
        "--no-verify",
        action="store_true",
        default=False,
        help="Skip the round-trip check of the escaped literal",
    )
    gen.add_argument(
        "--check-syntax",
        action="store_true",
        default=False,
        help="Parse the script with `luac -p` first (skipped if luac is missing)",
    )

    # ── run ───────────────────────────────────────────────────────────────
    run = sub.add_parser("run", help="Run every job in a job file")
    run.add_argument("--config", required=True, metavar="PATH", help="JSON job file")

    # ── check ─────────────────────────────────────────────────────────────
    chk = sub.add_parser("check", help="Exit 1 if any generated file is stale")
    chk.add_argument("--config", required=True, metavar="PATH", help="JSON job file")

    # ── paths ─────────────────────────────────────────────────────────────
    pth = sub.add_parser("paths", help="Print the native SDK library directories")
    pth.add_argument(
        "--home",
        default=None,
        metavar="DIR",
        help="Home directory (default: $HOME)",
    )
    pth.add_argument(
        "--native-dir",
        default=None,
        dest="native_dir",
        metavar="DIR",
        help="Native SDK directory; overrides --config and --home",
    )
    pth.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="JSON job file whose \"native_dir\" is used ahead of --home",
    )

    return parser


# ── Command implementations ───────────────────────────────────────────────────


def cmd_generate(
    source: str,
    template: str,
    output_dir: str,
    key: str = DEFAULT_PLACEHOLDER_KEY,
    style: str = "java",
    encoding: str = "utf-8",
    suffix: str = DEFAULT_TEMPLATE_SUFFIX,
    verify: bool = True,
    check_syntax: bool = False,
) -> GenerationResult:
    """Embed *source* into *template*; returns the GenerationResult."""
    options = build_options({
        "style": style,
        "encoding": encoding,
        "template_suffix": suffix,
        "verify": verify,
        "check_syntax": check_syntax,
    })
    result = generate(source, template, output_dir, placeholder_key=key, options=options)
    print(f"{'Generated' if result.written else 'Up to date'} → {result.output_path}")
    return result


def cmd_run(config: str) -> list[GenerationResult]:
    """Run every job of the job file at *config*."""
    job_file = load_job_file(config)
    results = run_jobs(job_file.jobs)
    written = sum(1 for r in results if r.written)
    for result in results:
        tag = "written " if result.written else "current "
        print(f"[{tag}] {result.output_path}")
    print(f"{len(results)} job(s), {written} written.")
    return results


def cmd_check(config: str) -> list[Path]:
    """Return (and print) the output paths that are stale; empty means all current."""
    job_file = load_job_file(config)
    stale = stale_outputs(job_file.jobs)
    if not stale:
        print(f"All {len(job_file.jobs)} generated file(s) up to date.")
    for path in stale:
        print(f"stale: {path}")
    return stale


def cmd_paths(
    home: Optional[str],
    native_dir: Optional[str],
    config: Optional[str] = None,
) -> BuildEnvironment:
    """
    Print the native directory and its library directories.

    Precedence: *native_dir*, then the job file's "native_dir", then *home*
    (falling back to $HOME).
    """
    job_native_dir = load_job_file(config).native_dir if config else None
    if native_dir:
        env = BuildEnvironment(native_dir=Path(native_dir))
    elif job_native_dir is not None:
        env = BuildEnvironment(native_dir=job_native_dir)
    else:
        env = BuildEnvironment.from_home(home or os.environ.get("HOME") or Path.home())
    missing = set(env.missing_library_dirs())
    print(f"native_dir: {env.native_dir}")
    for lib_dir in env.library_dirs():
        note = "  (missing)" if lib_dir in missing else ""
        print(f"  {lib_dir}{note}")
    return env


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        if ns.subcommand == "generate":
            cmd_generate(
                source=ns.source,
                template=ns.template,
                output_dir=ns.output_dir,
                key=ns.key,
                style=ns.style,
                encoding=ns.encoding,
                suffix=ns.suffix,
                verify=not ns.no_verify,
                check_syntax=ns.check_syntax,
            )
            return 0

        if ns.subcommand == "run":
            cmd_run(config=ns.config)
            return 0

        if ns.subcommand == "check":
            return 1 if cmd_check(config=ns.config) else 0

        if ns.subcommand == "paths":
            cmd_paths(home=ns.home, native_dir=ns.native_dir, config=ns.config)
            return 0
    except EmbedBaseError as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
