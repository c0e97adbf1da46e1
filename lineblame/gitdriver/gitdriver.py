# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import io
import logging
import shlex
import signal

from lineblame.gitdriver.lineattribution import LineAttribution
from lineblame.gitdriver.parsers import parseGitBlamePorcelain
from lineblame.qt import *

logger = logging.getLogger(__name__)


class GitDriver(QProcess):
    _commandStem = ["git"]

    @classmethod
    def setGitPath(cls, gitPath: str):
        # Treat command as POSIX even on Windows!
        cls._commandStem = shlex.split(gitPath or "git", posix=True)

    @classmethod
    def buildProbeCommand(cls) -> list[str]:
        return ["rev-parse", "--git-dir"]

    @classmethod
    def buildBlameCommand(cls, lineNumber: int, relativePath: str) -> list[str]:
        """
        Command line to blame a single line (1-based) of a file,
        in machine-readable format.
        """
        assert lineNumber >= 1, "git blame line numbers are 1-based"
        return [
            "blame",
            "-L", f"{lineNumber},{lineNumber}",
            "--porcelain",
            "--",
            relativePath,
        ]

    def __init__(self, *args: str, parent: QObject | None = None):
        super().__init__(parent)

        self.setObjectName("GitDriver")

        tokens = GitDriver._commandStem + list(args)
        self.setProgram(tokens[0])
        self.setArguments(tokens[1:])

        self.readyReadStandardError.connect(self._onReadyReadStandardError)
        self._stderrScrollback = io.BytesIO()
        self._stdout = None

    def _onReadyReadStandardError(self):
        raw = self.readAllStandardError().data()
        self._stderrScrollback.write(raw)

    def stderrScrollback(self) -> str:
        return self._stderrScrollback.getvalue().decode("utf-8", errors="replace").rstrip()

    def stdoutScrollback(self) -> str:
        if self._stdout is None:
            self._stdout = self.readAllStandardOutput().data().decode("utf-8", errors="replace")
        return self._stdout

    def readBlamePorcelain(self) -> LineAttribution | None:
        return parseGitBlamePorcelain(self.stdoutScrollback())

    def formatExitCode(self) -> str:
        code = self.exitCode()

        if WINDOWS:
            return f"{code}"

        try:
            s = signal.Signals(code)
            return f"{code} ({s.name})"
        except ValueError:
            pass

        return f"{code}"

    def formatCommandLine(self):
        return shlex.join([self.program()] + self.arguments())

    def errorText(self) -> str:
        from lineblame.localization import _

        stderr = self.stderrScrollback()
        text = _("Git command exited with code {0}.", self.formatExitCode())
        if stderr:
            text += " " + stderr
        return text
