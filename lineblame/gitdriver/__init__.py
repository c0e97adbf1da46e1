# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .gitdriver import GitDriver
from .lineattribution import LineAttribution, UNCOMMITTED_AUTHOR
from .parsers import parseGitBlamePorcelain
