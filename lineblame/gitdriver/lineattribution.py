# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses

UNCOMMITTED_AUTHOR = "Not Committed Yet"
"Author name that git blame reports for lines that aren't in any commit yet."


@dataclasses.dataclass(frozen=True)
class LineAttribution:
    author: str
    authorTime: int | None
    summary: str
    isUncommitted: bool = False
    commitId: str = ""

    @property
    def isUsable(self) -> bool:
        return self.authorTime is not None
