# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Keeps a blame annotation on the current line of the active editor.

Cursor moves are debounced per editor; a change of active editor
refreshes right away. Each query is tagged with the line it was launched
for, and its result is thrown away if the user has moved on since, or if
a newer query was launched for the same document.
"""

from __future__ import annotations

import enum
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from lineblame import settings
from lineblame.application import LBApplication
from lineblame.decoration import DecorationRenderer
from lineblame.qt import *
from lineblame.repodetector import RepoDetector
from lineblame.tasks import AbortRefresh, RefreshTask, RefreshTaskRunner
from lineblame.toolbox import *

if TYPE_CHECKING:
    from lineblame.editor import CodeEditor, EditorWindow

logger = logging.getLogger(__name__)


class RefreshState(enum.IntEnum):
    Idle = 0
    Pending = 1
    "Waiting for the debounce timer to fire"
    Querying = 2
    "Git is running"


class BlameController(QObject):
    refreshStarted = Signal(str, int)
    "documentId, 0-based line number"

    refreshDone = Signal(str, int, bool)
    "documentId, 0-based line number, whether an annotation is now shown"

    host: EditorWindow
    detector: RepoDetector
    runner: RefreshTaskRunner
    renderer: DecorationRenderer

    lastLineNumbers: dict[str, int]
    "Per document: last line that was successfully annotated"

    requestedLines: dict[str, int]
    "Per document: line that the most recent refresh request is for"

    latestTasks: dict[str, RefreshTask]
    "Per document: most recently launched task, the only one whose result may be shown"

    states: dict[str, RefreshState]

    def __init__(self, host: EditorWindow, parent: QObject | None = None):
        super().__init__(parent)
        self.setObjectName("BlameController")

        self.host = host
        self.detector = RepoDetector(self)
        self.runner = RefreshTaskRunner(self)
        self.renderer = DecorationRenderer(DecorationRenderer.makeDecorationKind())

        self.lastLineNumbers = {}
        self.requestedLines = {}
        self.states = {}
        self.latestTasks = {}
        self._debounceTimers: dict[CodeEditor, CallbackAccumulator] = {}

        self.runner.taskFinished.connect(self._onTaskFinished)

        host.selectionChanged.connect(self.onSelectionChanged)
        host.textEdited.connect(self.onTextEdited)
        host.activeEditorChanged.connect(self.onActiveEditorChanged)
        host.editorClosed.connect(self.forgetEditor)
        host.documentRenamed.connect(self.onDocumentRenamed)

        LBApplication.instance().prefsChanged.connect(self.onPrefsChanged)

    def state(self, documentId: str) -> RefreshState:
        return self.states.get(documentId, RefreshState.Idle)

    # -------------------------------------------------------------------------
    # Editor events

    def onSelectionChanged(self, editor: CodeEditor):
        documentId = editor.documentId()
        lineNumber = editor.cursorLine()

        if not settings.prefs.enabled:
            self.renderer.clear(editor)
            return

        if self.lastLineNumbers.get(documentId, -1) == lineNumber:
            # The text of the annotated line may have changed: don't vouch for it anymore
            if editor.isDirty():
                self.renderer.clear(editor)
            return

        # Leaving the annotated line
        self.renderer.clear(editor)
        self.lastLineNumbers.pop(documentId, None)

        self.requestedLines[documentId] = lineNumber
        self.states[documentId] = RefreshState.Pending

        timer = self._debounceTimer(editor)
        timer.setInterval(settings.prefs.debounceDelay)
        timer.start()

    def onTextEdited(self, editor: CodeEditor, firstLine: int, lastLine: int):
        annotatedLine = self.lastLineNumbers.get(editor.documentId(), -1)
        if firstLine <= annotatedLine <= lastLine:
            # The annotated line no longer matches what was committed
            self.renderer.clear(editor)

    def onActiveEditorChanged(self, editor: CodeEditor | None):
        if editor is None:
            return
        self._cancelDebounce(editor)
        self.refresh(editor)

    def onDocumentRenamed(self, editor: CodeEditor, oldDocumentId: str):
        self._cancelDebounce(editor)
        self.renderer.clear(editor)
        self._forgetDocument(oldDocumentId)

        # The document may have just landed in a repository
        if editor is self.host.activeEditor():
            self.refresh(editor)

    def forgetEditor(self, editor: CodeEditor):
        with suppress(KeyError):
            timer = self._debounceTimers.pop(editor)
            timer.stop()
            timer.deleteLater()

        self._forgetDocument(editor.documentId())

    def _forgetDocument(self, documentId: str):
        logger.debug(f"Forgetting {documentId}")
        self.lastLineNumbers.pop(documentId, None)
        self.requestedLines.pop(documentId, None)
        self.states.pop(documentId, None)
        self.latestTasks.pop(documentId, None)

    def onPrefsChanged(self):
        for editor in self.host.editors():
            self._cancelDebounce(editor)
            self.renderer.clear(editor)

        self.renderer.kind = DecorationRenderer.makeDecorationKind()
        self.lastLineNumbers.clear()
        self.requestedLines.clear()
        self.states.clear()
        self.latestTasks.clear()

        self.refreshActiveEditor()

    # -------------------------------------------------------------------------
    # Refresh

    def refreshActiveEditor(self):
        editor = self.host.activeEditor()
        if editor is not None:
            self.refresh(editor)

    def refresh(self, editor: CodeEditor):
        """ Query the attribution of the editor's current line right away. """

        documentId = editor.documentId()

        if not settings.prefs.enabled:
            self.renderer.clear(editor)
            return

        lineNumber = editor.cursorLine()
        self.requestedLines[documentId] = lineNumber
        self.states[documentId] = RefreshState.Querying
        self.refreshStarted.emit(documentId, lineNumber)

        task = RefreshTask(self.runner, editor, lineNumber, self.detector)
        self.latestTasks[documentId] = task
        self.runner.put(task)

    def _debounceTimer(self, editor: CodeEditor) -> CallbackAccumulator:
        try:
            return self._debounceTimers[editor]
        except KeyError:
            timer = CallbackAccumulator(self, lambda: self.refresh(editor), settings.prefs.debounceDelay)
            self._debounceTimers[editor] = timer
            return timer

    def _cancelDebounce(self, editor: CodeEditor):
        with suppress(KeyError):
            self._debounceTimers[editor].stop()

    def _onTaskFinished(self, task: RefreshTask):
        documentId = task.documentId
        lineNumber = task.lineNumber

        if self.latestTasks.get(documentId) is not task:
            logger.debug(f"Discarding superseded {task}")
            return

        del self.latestTasks[documentId]

        if self.requestedLines.get(documentId, -1) != lineNumber:
            logger.debug(f"Discarding stale {task}")
            return

        if self.states.get(documentId) == RefreshState.Querying:
            self.states[documentId] = RefreshState.Idle

        attribution = task.result
        exception = task.exception

        if isinstance(exception, AbortRefresh):
            logger.debug(f"No blame for {task}: {exception}")
        elif exception is not None:
            logger.debug(f"Blame failed for {task}", exc_info=exception)

        if exception is not None:
            attribution = None

        self.renderer.render(task.editor, lineNumber, attribution)

        shown = attribution is not None and attribution.isUsable
        if shown:
            self.lastLineNumbers[documentId] = lineNumber

        self.refreshDone.emit(documentId, lineNumber, shown)
