# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging

from lineblame.settings import LoggingLevel, Prefs, QtApiNames
from . import *


def testPrefsDefaults():
    prefs = Prefs()
    assert prefs.enabled
    assert prefs.debounceDelay == 100
    assert prefs.annotationColor == "#99999999"
    assert prefs.hoverFormat() == QLocale.FormatType.LongFormat


def testPrefsRoundTripThroughDict():
    prefs = Prefs()
    prefs.debounceDelay = 250
    prefs.hoverTimeFormat = "yyyy-MM-dd HH:mm"
    prefs.verbosity = LoggingLevel.Info

    obj = prefs.toDict()
    assert not any(key.startswith("_") for key in obj)

    prefs2 = Prefs()
    prefs2.fromDict(obj)
    assert prefs2 == prefs
    assert prefs2.hoverFormat() == "yyyy-MM-dd HH:mm"


def testPrefsRejectBadValues(caplog):
    prefs = Prefs()

    with caplog.at_level(logging.WARNING):
        prefs.fromDict({
            "debounceDelay": "soon",
            "forceQtApi": "pyqt4",
            "someOldKey": True,
            "annotationMargin": 3,
        })

    assert prefs.debounceDelay == 100
    assert prefs.forceQtApi == QtApiNames.Automatic
    assert not hasattr(prefs, "someOldKey")
    assert prefs.annotationMargin == 3.0
    assert type(prefs.annotationMargin) is float
    assert "debounceDelay" in caplog.text
    assert "someOldKey" in caplog.text


def testPrefsResetAndDirtyFlag():
    prefs = Prefs()
    prefs.enabled = False
    prefs.setDirty()
    assert prefs.isDirty()

    # Test mode never touches the user's prefs file
    prefs.write()
    assert not prefs.isDirty()
    assert not prefs.load()

    prefs.reset()
    assert prefs.enabled


def testMonoFontOverride(qtbot):
    prefs = Prefs()
    prefs.fontSize = 17
    assert prefs.monoFont().pointSize() == 17
