# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator
from typing import TYPE_CHECKING

import pygit2
import pytest
from pytestqt.qtbot import QtBot

from lineblame.application import LBApplication

if TYPE_CHECKING:
    from lineblame.blamecontroller import BlameController
    from lineblame.editor import EditorWindow


def setUpGitConfigSearchPaths():
    """
    Prevent unit tests from accessing the host system's git config files.
    This modifies libgit2 search paths and GIT_CONFIG environment variables
    for vanilla git.
    """
    ConfigLevel = pygit2.enums.ConfigLevel

    levels = [
        ConfigLevel.GLOBAL,
        ConfigLevel.XDG,
        ConfigLevel.SYSTEM,
        ConfigLevel.PROGRAMDATA,
    ]

    for level in levels:
        pygit2.settings.search_path[level] = ""

    os.environ["GIT_CONFIG_NOSYSTEM"] = "1"
    os.environ["GIT_CONFIG_SYSTEM"] = os.devnull
    os.environ["GIT_CONFIG_GLOBAL"] = os.devnull


@pytest.fixture(scope='session', autouse=True)
def maskHostGitConfig():
    setUpGitConfigSearchPaths()


@pytest.fixture(scope='session', autouse=True)
def setUpLogging():
    rootLogger = logging.root
    rootLogger.setLevel(logging.DEBUG)

    yield

    # Chatty destructors may cause spam after pytest has wound down.
    # Work around https://github.com/pytest-dev/pytest/issues/5502
    for handler in rootLogger.handlers:
        rootLogger.removeHandler(handler)


@pytest.fixture(scope="session")
def qapp_args():
    mainPyPath = os.path.join(os.path.dirname(__file__), "..", "lineblame", "__main__.py")
    mainPyPath = os.path.normpath(mainPyPath)
    return [mainPyPath]


@pytest.fixture(scope="session")
def qapp_cls():
    yield LBApplication


@pytest.fixture(autouse=True)
def resetPrefs():
    from lineblame import settings
    from lineblame.gitdriver import GitDriver

    settings.prefs.reset()
    GitDriver.setGitPath(settings.prefs.gitPath)
    yield
    settings.prefs.reset()
    GitDriver.setGitPath(settings.prefs.gitPath)


@pytest.fixture
def tempDir(monkeypatch) -> Generator[tempfile.TemporaryDirectory, None, None]:
    td = tempfile.TemporaryDirectory(prefix="lineblametest-")

    # Resolve symlinks (e.g. /tmp on macOS) so paths compare equal to what git reports
    td.name = os.path.realpath(td.name)

    # Don't let git wander out of the temp dir looking for a repository
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", td.name)

    yield td
    td.cleanup()


@pytest.fixture
def editorWindow(qtbot: QtBot) -> Generator[EditorWindow, None, None]:
    from lineblame import qt
    from lineblame.appconsts import APP_TESTMODE
    from lineblame.editor import EditorWindow

    # Turn on test mode: Prevent loading/saving prefs
    assert APP_TESTMODE
    qt.QStandardPaths.setTestModeEnabled(True)

    app = LBApplication.instance()
    app.beginSession(bootUi=False)

    window = EditorWindow()
    qtbot.addWidget(window)
    window.show()
    yield window

    app.endSession()


@pytest.fixture
def controller(editorWindow) -> BlameController:
    from lineblame.blamecontroller import BlameController
    return BlameController(editorWindow, editorWindow)
