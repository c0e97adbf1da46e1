# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from lineblame.qt import *

if PYSIDE6:
    from PySide6.QtTest import QTest
else:
    from PyQt6.QtTest import QTest
