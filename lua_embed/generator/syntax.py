"""Optional Lua syntax check of the source script via `luac -p`."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from lua_embed.exceptions import LuaSyntaxError

__all__ = ["LuaSyntaxChecker"]

logger = logging.getLogger(__name__)


class LuaSyntaxChecker:
    """
    Parse a Lua file with ``luac -p`` without producing bytecode.

    When luac is not on PATH the check is skipped and logged at debug level.

    Usage::
        LuaSyntaxChecker().check(Path("init.lua"))
    """

    def __init__(self, luac: str = "luac", timeout: float = 10.0) -> None:
        self._luac = shutil.which(luac)
        self._timeout = timeout
        if self._luac is None:
            logger.debug("%s not found — Lua syntax check will be skipped", luac)

    @property
    def available(self) -> bool:
        return self._luac is not None

    def check(self, path: Path) -> bool:
        """
        Return True if the file was checked and parsed, False if skipped.

        Raises
        ------
        LuaSyntaxError when luac rejects the file.
        """
        if self._luac is None:
            return False
        try:
            result = subprocess.run(
                [self._luac, "-p", str(path)],
                capture_output=True, text=True, timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("luac check failed: %s", exc)
            return False

        if result.returncode != 0:
            msg = result.stderr.strip()
            msg = re.sub(r"^[^\s:]*luac[^\s:]*:\s*", "", msg)
            raise LuaSyntaxError(f"Lua syntax error: {msg}")
        logger.debug("luac accepted %s", path)
        return True
