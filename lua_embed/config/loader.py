"""
Job file loader.

A job file lists every generation job of a build, replacing one copy of the
generation logic per build variant::

    {
      "native_dir": "/opt/corona/native",
      "defaults": {"style": "java", "encoding": "utf-8"},
      "jobs": [
        {
          "source": "lua/init.lua",
          "template": "templates/CoronaLua.java.template",
          "output_dir": "build/generated/source/lua",
          "placeholder_key": "code"
        }
      ]
    }

Relative paths resolve against the job file's directory. Any option key may
appear in "defaults" or be overridden per job.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from lua_embed.exceptions import ConfigError
from lua_embed.generator.models import DEFAULT_PLACEHOLDER_KEY, GenerationJob, GeneratorOptions

__all__ = ["JobFile", "load_job_file", "parse_job_file", "build_options"]

logger = logging.getLogger(__name__)

_OPTION_TYPES: dict[str, type] = {
    f.name: type(f.default) for f in dataclasses.fields(GeneratorOptions)
}
_JOB_KEYS  = {"source", "template", "output_dir", "placeholder_key"}
_TOP_KEYS  = {"native_dir", "defaults", "jobs"}
_REQUIRED  = ("source", "template", "output_dir")


@dataclass
class JobFile:
    """Parsed job file: the jobs to run plus the explicit native directory, if any."""
    jobs:       list[GenerationJob] = field(default_factory=list)
    native_dir: Optional[Path]      = None
    path:       Optional[Path]      = None

    def __str__(self) -> str:
        return f"JobFile({self.path}, {len(self.jobs)} job(s))"


def load_job_file(path) -> JobFile:
    """
    Read and parse the JSON job file at *path*.

    Raises
    ------
    ConfigError if the file is unreadable, not JSON, or malformed.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read job file {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Job file {path} is not valid JSON: {exc}") from exc

    job_file = parse_job_file(data, base_dir=path.parent)
    job_file.path = path
    logger.debug("Loaded %s", job_file)
    return job_file


def parse_job_file(data: Any, base_dir: Path = Path(".")) -> JobFile:
    """Build a JobFile from already-decoded JSON *data*."""
    if not isinstance(data, dict):
        raise ConfigError("Job file must contain a JSON object")
    _reject_unknown(data, _TOP_KEYS, "job file")

    defaults = data.get("defaults", {})
    if not isinstance(defaults, dict):
        raise ConfigError('"defaults" must be an object')
    _reject_unknown(defaults, set(_OPTION_TYPES), '"defaults"')

    entries = data.get("jobs")
    if not isinstance(entries, list) or not entries:
        raise ConfigError('"jobs" must be a non-empty list')

    jobs = [_parse_job(entry, index, defaults, base_dir) for index, entry in enumerate(entries)]

    native_dir = data.get("native_dir")
    if native_dir is not None:
        if not isinstance(native_dir, str) or not native_dir:
            raise ConfigError('"native_dir" must be a non-empty string')
        native_dir = _resolve(native_dir, base_dir)

    return JobFile(jobs=jobs, native_dir=native_dir)


def build_options(values: dict[str, Any]) -> GeneratorOptions:
    """Create GeneratorOptions from a mapping, checking each value's type."""
    for key, value in values.items():
        expected = _OPTION_TYPES.get(key)
        if expected is None:
            raise ConfigError(f"Unknown option {key!r}")
        if type(value) is not expected:
            raise ConfigError(
                f"Option {key!r} must be {expected.__name__}, got {type(value).__name__}"
            )
        if expected is str and not value:
            raise ConfigError(f"Option {key!r} must not be empty")
    options = GeneratorOptions(**values)
    options.literal_style()   # fail fast on an unknown style
    return options


# ── Internal helpers ──────────────────────────────────────────────────────────

def _parse_job(entry: Any, index: int, defaults: dict, base_dir: Path) -> GenerationJob:
    where = f"jobs[{index}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where} must be an object")
    _reject_unknown(entry, _JOB_KEYS | set(_OPTION_TYPES), where)

    for key in _REQUIRED:
        value = entry.get(key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{where}: {key!r} is required and must be a string")

    key = entry.get("placeholder_key", DEFAULT_PLACEHOLDER_KEY)
    if not isinstance(key, str) or not key:
        raise ConfigError(f"{where}: 'placeholder_key' must be a non-empty string")

    overrides = {k: v for k, v in entry.items() if k in _OPTION_TYPES}
    try:
        options = build_options({**defaults, **overrides})
    except ConfigError as exc:
        raise ConfigError(f"{where}: {exc}") from exc

    return GenerationJob(
        source=_resolve(entry["source"], base_dir),
        template=_resolve(entry["template"], base_dir),
        output_dir=_resolve(entry["output_dir"], base_dir),
        placeholder_key=key,
        options=options,
    )


def _resolve(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _reject_unknown(mapping: dict, allowed: set, where: str) -> None:
    unknown = sorted(set(mapping) - allowed)
    if unknown:
        raise ConfigError(f"Unknown key(s) in {where}: {', '.join(unknown)}")
