# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import logging

from lineblame.prefsfile import PrefsFile
from lineblame.qt import *
from lineblame.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL

logger = logging.getLogger(__name__)


class QtApiNames(enum.StrEnum):
    Automatic = ""
    PyQt6 = "pyqt6"
    PySide6 = "pyside6"


class LoggingLevel(enum.IntEnum):
    Benchmark = BENCHMARK_LOGGING_LEVEL
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs(PrefsFile):
    _filename = "prefs.json"

    _category_blame             : int                   = 0
    enabled                     : bool                  = True
    debounceDelay               : int                   = 100
    showHover                   : bool                  = True
    hoverTimeFormat             : str                   = ""
    annotationMargin            : float                 = 2.0
    annotationColor             : str                   = "#99999999"

    _category_editor            : int                   = 0
    font                        : str                   = ""
    fontSize                    : int                   = 0

    _category_advanced          : int                   = 0
    gitPath                     : str                   = "git"
    verbosity                   : LoggingLevel          = LoggingLevel.Debug if APP_TESTMODE else LoggingLevel.Warning
    forceQtApi                  : QtApiNames            = QtApiNames.Automatic

    def monoFont(self):
        monoFont = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
        if self.font:
            monoFont.fromString(self.font)
        if self.fontSize > 0:
            monoFont.setPointSize(self.fontSize)
        return monoFont

    def hoverFormat(self) -> str | QLocale.FormatType:
        return self.hoverTimeFormat or QLocale.FormatType.LongFormat


# Initialize default prefs.
# The app should load the user's prefs with prefs.load().
prefs = Prefs()
