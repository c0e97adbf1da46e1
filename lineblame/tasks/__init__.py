# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from lineblame.tasks.refreshtask import (
    AbortRefresh,
    FlowControlToken,
    RefreshTask,
    RefreshTaskRunner,
)
