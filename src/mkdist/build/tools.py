"""External executables — located once, then invoked through subprocess."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Available:
    """The tool was found; ``command`` is the argv prefix to run it."""

    command: tuple[str, ...]


@dataclass(frozen=True)
class Unavailable:
    """The tool could not be found."""

    reason: str


ToolStatus = Available | Unavailable


class ExternalTool:
    """A command-line tool resolved lazily on first use.

    ``command`` is a command line such as ``"esbuild"`` or ``"npx tsc"``; its
    first word is looked up on PATH. The lookup runs once per instance and
    its outcome is reused by every later call.
    """

    def __init__(self, name: str, command: str, timeout: float = 60.0):
        self.name = name
        self.command = command
        self.timeout = timeout
        self._status: ToolStatus | None = None
        self._lock = threading.Lock()

    def resolve(self) -> ToolStatus:
        with self._lock:
            if self._status is None:
                self._status = self._lookup()
            return self._status

    def _lookup(self) -> ToolStatus:
        argv = shlex.split(self.command)
        if not argv:
            return Unavailable(f"No command configured for `{self.name}`")
        executable = shutil.which(argv[0])
        if executable is None:
            return Unavailable(f"`{argv[0]}` not found on PATH")
        logger.debug("Resolved %s to %s", self.name, executable)
        return Available((executable, *argv[1:]))

    def run(
        self,
        args: list[str],
        input: str | None = None,
        cwd: str | None = None,
    ) -> subprocess.CompletedProcess:
        """Run the tool with ``args``; raises ``FileNotFoundError`` if it is unavailable."""
        status = self.resolve()
        if isinstance(status, Unavailable):
            raise FileNotFoundError(status.reason)
        cmd = [*status.command, *args]
        logger.debug("Running %s", " ".join(cmd))
        return subprocess.run(
            cmd,
            input=input,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            timeout=self.timeout,
        )
