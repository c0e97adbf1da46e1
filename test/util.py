# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import tempfile
import time
from collections.abc import Callable
from typing import TypeVar

import pygit2
from pygit2 import Signature

from . import *

TEST_SIGNATURE = Signature("Test Person", "toto@example.com", 1672600000, 0)

_T = TypeVar("_T")


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)


def makeRepo(tempDir: tempfile.TemporaryDirectory | str, name="TestRepo") -> pygit2.Repository:
    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    path = os.path.join(tempDirPath, name)
    return pygit2.init_repository(path)


def makeSignature(name: str, hoursAgo: float = 0, email="") -> Signature:
    timestamp = int(time.time() - hoursAgo * 3600)
    email = email or f"{name.lower()}@example.com"
    return Signature(name, email, timestamp, 0)


def commitFile(
        repo: pygit2.Repository,
        relativePath: str,
        text: str,
        message: str,
        signature: Signature = TEST_SIGNATURE,
) -> pygit2.Oid:
    writeFile(os.path.join(repo.workdir, relativePath), text)

    repo.index.add(relativePath)
    repo.index.write()
    tree = repo.index.write_tree()

    parents = [] if repo.head_is_unborn else [repo.head.target]
    return repo.create_commit("HEAD", signature, signature, message, tree, parents)


def repoFilePath(repo: pygit2.Repository, relativePath: str) -> str:
    return os.path.normpath(os.path.join(repo.workdir, relativePath))


def waitUntilTrue(
        callback: Callable[[], _T],
        timeout: int = 5000
) -> _T:
    interval = 100
    assert timeout >= interval
    for _ in range(0, timeout, interval):
        result = callback()
        if result:
            return result
        QTest.qWait(interval)
    raise TimeoutError(f"retry failed after {timeout} ms timeout")


def findMenuAction(menu: QMenu | QMenuBar, objectName: str) -> QAction:
    for action in menu.findChildren(QAction):
        if action.objectName() == objectName:
            return action
    raise KeyError(f"didn't find menu action {objectName}")


def moveCursorToLine(editor: QPlainTextEdit, lineNumber: int, column: int = 0):
    block = editor.document().findBlockByNumber(lineNumber)
    assert block.isValid()
    cursor = QTextCursor(block)
    cursor.setPosition(block.position() + column)
    editor.setTextCursor(cursor)


def summonToolTip(target: QWidget, localPoint: QPoint):
    # QTest.mouseMove doesn't trigger the tooltip in offscreen tests,
    # so post a QHelpEvent instead.
    QToolTip.hideText()
    helpEvent = QHelpEvent(QEvent.Type.ToolTip, localPoint, target.mapToGlobal(localPoint))
    QApplication.instance().postEvent(target, helpEvent)
    try:
        waitUntilTrue(QToolTip.isVisible, 300)
    except TimeoutError:
        return ""
    text = QToolTip.text()
    QToolTip.hideText()
    waitUntilTrue(lambda: not QToolTip.isVisible())  # may need some time to fade out
    return text
