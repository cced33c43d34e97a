"""
Generation task — read a Lua script and a template, write the generated source.

Pipeline (per job)
──────────────────
  1. derive output name  (template suffix stripped)
  2. read source + template       → MissingInputError
  3. optional luac syntax check   → LuaSyntaxError
  4. escape source into a literal
  5. round-trip self-check        → RoundTripError
  6. substitute the placeholder   → TemplateMismatchError
  7. atomic write                 → WriteFailureError

Steps 1-6 touch nothing on disk, so any failure there leaves the output
directory untouched. An artifact that already matches byte-for-byte is not
rewritten.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from lua_embed.escaper.literal import evaluate_literal_expression, to_literal_expression
from lua_embed.exceptions import (
    ConfigError,
    MissingInputError,
    RoundTripError,
    WriteFailureError,
)
from lua_embed.template.renderer import TemplateRenderer

from .models import DEFAULT_PLACEHOLDER_KEY, GenerationJob, GenerationResult, GeneratorOptions
from .syntax import LuaSyntaxChecker

__all__ = [
    "generate",
    "render_job",
    "run_job",
    "run_jobs",
    "check_up_to_date",
    "stale_outputs",
]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ── Public API ────────────────────────────────────────────────────────────────

def generate(
    source_path: PathLike,
    template_path: PathLike,
    output_dir: PathLike,
    placeholder_key: str = DEFAULT_PLACEHOLDER_KEY,
    options: Optional[GeneratorOptions] = None,
) -> GenerationResult:
    """
    Embed the Lua script at *source_path* into *template_path*.

    Args:
        source_path:     Lua script to embed.
        template_path:   Template whose name ends with the template suffix.
        output_dir:      Directory for the generated file (created if needed).
        placeholder_key: Key whose token receives the literal (default "code").
        options:         GeneratorOptions; defaults to the Java style.

    Returns:
        GenerationResult describing the artifact.

    Raises:
        MissingInputError, TemplateMismatchError, TemplateNameError,
        RoundTripError, LuaSyntaxError, WriteFailureError, ConfigError.
    """
    job = GenerationJob(
        source=Path(source_path),
        template=Path(template_path),
        output_dir=Path(output_dir),
        placeholder_key=placeholder_key,
        options=options or GeneratorOptions(),
    )
    return run_job(job)


def render_job(job: GenerationJob) -> tuple[Path, bytes]:
    """Produce the artifact path and encoded content without writing anything."""
    options = job.options
    output_path = job.output_path
    style = options.literal_style()

    source_text = _read_text(job.source, options.encoding, "Lua source")
    template_text = _read_text(job.template, options.encoding, "template")

    if options.check_syntax:
        LuaSyntaxChecker().check(job.source)

    literal = to_literal_expression(source_text, style)
    if options.verify:
        _verify_round_trip(literal, source_text, job)

    renderer = TemplateRenderer(options.token_begin, options.token_end)
    content = renderer.render(template_text, {job.placeholder_key: literal})

    try:
        data = content.encode(options.encoding)
    except UnicodeEncodeError as exc:
        raise WriteFailureError(
            f"Generated source for {output_path} cannot be encoded as {options.encoding}: {exc}"
        ) from exc
    return output_path, data


def run_job(job: GenerationJob) -> GenerationResult:
    """Render *job* and write the artifact unless it is already current."""
    output_path, data = render_job(job)

    if _is_current(output_path, data):
        logger.info("Up to date: %s", output_path)
        return GenerationResult(output_path=output_path, written=False, size=len(data))

    _write_atomic(output_path, data)
    logger.info("Generated %s from %s", output_path, job.source)
    return GenerationResult(output_path=output_path, written=True, size=len(data))


def run_jobs(jobs: Iterable[GenerationJob]) -> list[GenerationResult]:
    """
    Run several jobs in order.

    Raises ConfigError before running anything if two jobs share an output path.
    """
    jobs = list(jobs)
    _ensure_disjoint(jobs)
    return [run_job(job) for job in jobs]


def check_up_to_date(job: GenerationJob) -> bool:
    """Return True if the artifact on disk equals what *job* would generate."""
    output_path, data = render_job(job)
    current = _is_current(output_path, data)
    logger.debug("%s is %s", output_path, "current" if current else "stale")
    return current


def stale_outputs(jobs: Iterable[GenerationJob]) -> list[Path]:
    """
    Return the output paths of *jobs* that are not up to date.

    Raises ConfigError, as run_jobs() does, if two jobs share an output path.
    """
    jobs = list(jobs)
    _ensure_disjoint(jobs)
    return [job.output_path for job in jobs if not check_up_to_date(job)]


# ── Internal helpers ──────────────────────────────────────────────────────────

def _read_text(path: Path, encoding: str, what: str) -> str:
    """Read *path* exactly; no newline translation so CR / CRLF survive."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise MissingInputError(f"Cannot read {what} {path}: {exc.strerror or exc}") from exc
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as exc:
        raise MissingInputError(f"Cannot decode {what} {path} as {encoding}: {exc}") from exc
    except LookupError as exc:
        raise ConfigError(f"Unknown encoding {encoding!r}") from exc


def _verify_round_trip(literal: str, source_text: str, job: GenerationJob) -> None:
    style = job.options.literal_style()
    if evaluate_literal_expression(literal, style) != source_text:
        raise RoundTripError(
            f"Escaped literal for {job.source} does not evaluate back to the source text"
        )


def _is_current(output_path: Path, data: bytes) -> bool:
    try:
        return output_path.is_file() and output_path.read_bytes() == data
    except OSError:
        return False


def _write_atomic(output_path: Path, data: bytes) -> None:
    """Write through a temp file in the same directory, then replace."""
    directory = output_path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=directory
        )
    except OSError as exc:
        raise WriteFailureError(f"Cannot create output in {directory}: {exc}") from exc

    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_name, _target_mode(output_path))
        os.replace(tmp_name, output_path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise WriteFailureError(f"Cannot write {output_path}: {exc}") from exc


def _target_mode(output_path: Path) -> int:
    """Mode of the artifact being replaced, else 0o666 minus the umask."""
    if output_path.is_file():
        return stat.S_IMODE(output_path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _ensure_disjoint(jobs: list[GenerationJob]) -> None:
    seen: dict[Path, GenerationJob] = {}
    for job in jobs:
        target = job.output_path.resolve()
        if target in seen:
            raise ConfigError(
                f"{job} and {seen[target]} both write {target}; "
                "each job needs its own output path"
            )
        seen[target] = job
