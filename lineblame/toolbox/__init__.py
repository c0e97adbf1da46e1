# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .benchmark import Benchmark, benchmark
from .qsignalconnectcontext import QSignalConnectContext
from .qtutils import *
from .textutils import *
