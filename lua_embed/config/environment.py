"""
BuildEnvironment — explicit location of the prebuilt native SDK libraries.

The Android build used to derive this from ``$HOME`` inside the build
script. Here the home directory (or the native directory itself) is passed
in, so nothing below the CLI reads the process environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = ["BuildEnvironment", "NATIVE_SUBDIR", "LIBRARY_SUBDIRS"]

NATIVE_SUBDIR = Path("Library") / "Application Support" / "Corona" / "Native"

# flat-dir repositories searched for the SDK's aar / jar files
LIBRARY_SUBDIRS = (
    Path("Corona") / "android" / "lib" / "gradle",
    Path("Corona") / "android" / "lib" / "Corona" / "libs",
)


@dataclass(frozen=True)
class BuildEnvironment:
    native_dir: Path

    @classmethod
    def from_home(cls, home) -> "BuildEnvironment":
        """Environment rooted at the standard native directory under *home*."""
        return cls(native_dir=Path(home) / NATIVE_SUBDIR)

    def library_dirs(self) -> list[Path]:
        return [self.native_dir / sub for sub in LIBRARY_SUBDIRS]

    def missing_library_dirs(self) -> list[Path]:
        return [d for d in self.library_dirs() if not d.is_dir()]
