# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from contextlib import suppress
from typing import TYPE_CHECKING

from lineblame.gitdriver import GitDriver
from lineblame.qt import *
from lineblame.tasks import AbortRefresh

if TYPE_CHECKING:
    from lineblame.tasks import RefreshTask

logger = logging.getLogger(__name__)


class RepoDetector(QObject):
    """
    Remembers which workspace roots are Git working trees.

    A root is probed at most once; the verdict (positive or negative)
    sticks for the lifetime of the detector.
    """

    _cache: dict[str, bool]

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self.setObjectName("RepoDetector")
        self._cache = {}

    @staticmethod
    def normalizeRoot(root: str) -> str:
        return os.path.normpath(os.path.abspath(root))

    def cachedResult(self, root: str) -> bool | None:
        return self._cache.get(self.normalizeRoot(root))

    def flowIsUnderVersionControl(self, task: RefreshTask, root: str):
        root = self.normalizeRoot(root)

        with suppress(KeyError):
            return self._cache[root]

        try:
            yield from task.flowCallGit(*GitDriver.buildProbeCommand(), workdir=root)
            isRepo = True
        except AbortRefresh as exc:
            logger.debug(f"Probe failed in {root}: {exc}")
            isRepo = False

        self._cache[root] = isRepo
        logger.info(f"Workspace {root} is {'' if isRepo else 'not '}under version control")
        return isRepo
