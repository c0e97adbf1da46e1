# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
PyQt6/PySide6 compatibility layer
"""

# LineBlame's preferred Qt binding is PyQt6, but you can use PySide6
# via the QT_API environment variable. Values recognized by QT_API:
#       pyqt6
#       pyside6
#
# If you're running unit tests, use the PYTEST_QT_API environment variable instead.

import json as _json
import logging as _logging
import os as _os
import sys as _sys
from contextlib import suppress as _suppress

from lineblame.appconsts import *

_logger = _logging.getLogger(__name__)

_qtBindingOrder = ["pyqt6", "pyside6"]

QT6 = False
PYSIDE6 = False
PYQT6 = False
MACOS = False
WINDOWS = False

_qtBindingBootPref = _os.environ.get("QT_API", "").lower()

# If QT_API isn't set, see if the app's prefs file specifies a preferred Qt binding
if not _qtBindingBootPref:
    if _sys.platform == "darwin":
        _prefsPath = _os.path.expanduser("~/Library/Preferences")
    else:
        _prefsPath = _os.environ.get("XDG_CONFIG_HOME", _os.path.expanduser("~/.config"))
    _prefsPath = _os.path.join(_prefsPath, APP_SYSTEM_NAME, "prefs.json")
    with _suppress(OSError, ValueError):
        with open(_prefsPath, encoding="utf-8") as _f:
            _jsonPrefs = _json.load(_f)
        _qtBindingBootPref = _jsonPrefs.get("forceQtApi", "").lower()

if _qtBindingBootPref:
    if _qtBindingBootPref not in _qtBindingOrder:
        # Don't touch default binding order if user passed in an unsupported binding name.
        _logger.warning(f"Unrecognized Qt binding name: '{_qtBindingBootPref}'")
    else:
        # Move preferred binding to front of list
        _qtBindingOrder.remove(_qtBindingBootPref)
        _qtBindingOrder.insert(0, _qtBindingBootPref)

_logger.debug(f"Qt binding order is: {_qtBindingOrder}")

QT_BINDING = ""

for _tentative in _qtBindingOrder:
    assert _tentative.islower()

    with _suppress(ImportError):
        if _tentative == "pyside6":
            from PySide6.QtCore import *
            from PySide6.QtWidgets import *
            from PySide6.QtGui import *
            QT_BINDING = "PySide6"
            QT6 = PYSIDE6 = True
        elif _tentative == "pyqt6":
            from PyQt6.QtCore import *
            from PyQt6.QtWidgets import *
            from PyQt6.QtGui import *
            QT_BINDING = "PyQt6"
            QT6 = PYQT6 = True
        else:
            _logger.warning(f"Unsupported Qt binding {_tentative}")

    if QT_BINDING:
        break  # We've successfully imported a binding, stop looking at candidates
else:
    _sys.stderr.write("No Qt binding found. Please install PyQt6 or PySide6.\n")
    _sys.exit(1)

# -----------------------------------------------------------------------------
# Set up platform constants

QT_BINDING_BOOTPREF = _qtBindingBootPref
KERNEL = QSysInfo.kernelType().lower()
MACOS = KERNEL == "darwin"
WINDOWS = KERNEL == "winnt"

# -----------------------------------------------------------------------------
# Patch some holes and incompatibilities in Qt bindings

# Match PyQt signal/slot names with PySide6
if PYQT6:
    Signal = pyqtSignal
    SignalInstance = pyqtBoundSignal
    Slot = pyqtSlot


# -----------------------------------------------------------------------------
# Utility functions

def qAppName():
    """ User-facing application name. Shorthand for QApplication.applicationDisplayName(). """
    return QApplication.applicationDisplayName()
