# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from contextlib import suppress

import pygit2

from lineblame import settings
from lineblame.editor.codeeditor import CodeEditor
from lineblame.localization import *
from lineblame.qt import *
from lineblame.toolbox import *

logger = logging.getLogger(__name__)


class EditorWindow(QMainWindow):
    """
    Tabbed editor host.

    Relays the editor events that matter to blame annotations:
    cursor moves, edits, focus changes between tabs, saving an untitled
    buffer under a name, and tabs closing.
    """

    selectionChanged = Signal(CodeEditor)
    textEdited = Signal(CodeEditor, int, int)
    "Emitted with the first and last 0-based lines touched by an edit"
    activeEditorChanged = Signal(object)
    "Emitted with the newly-focused CodeEditor, or None if no editor is left"
    editorClosed = Signal(CodeEditor)
    documentRenamed = Signal(CodeEditor, str)
    "Emitted with the editor and its previous document id"

    tabs: QTabWidget
    workspaceRoots: list[str]

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("LBEditorWindow")
        self.setWindowTitle(qAppName())

        self.workspaceRoots = []

        self.tabs = QTabWidget(self)
        self.tabs.setDocumentMode(True)
        self.tabs.setTabsClosable(True)
        self.tabs.setMovable(True)
        self.tabs.currentChanged.connect(self.onCurrentTabChanged)
        self.tabs.tabCloseRequested.connect(self.closeTab)
        self.setCentralWidget(self.tabs)

        self.makeMenu()

    def makeMenu(self):
        menubar = self.menuBar()

        fileMenu = menubar.addMenu(_("&File"))
        fileMenu.setObjectName("LBFileMenu")

        openAction = fileMenu.addAction(_("&Open File…"), self.openFileDialog)
        openAction.setShortcut(QKeySequence.StandardKey.Open)
        fileMenu.addAction(_("Open &Folder…"), self.openFolderDialog)
        fileMenu.addSeparator()
        saveAction = fileMenu.addAction(_("&Save"), self.saveCurrentEditor)
        saveAction.setShortcut(QKeySequence.StandardKey.Save)
        closeAction = fileMenu.addAction(_("&Close Tab"), lambda: self.closeTab(self.tabs.currentIndex()))
        closeAction.setShortcut(QKeySequence.StandardKey.Close)
        fileMenu.addSeparator()
        quitAction = fileMenu.addAction(_("&Quit"), self.close)
        quitAction.setShortcut(QKeySequence.StandardKey.Quit)
        quitAction.setMenuRole(QAction.MenuRole.QuitRole)

        viewMenu = menubar.addMenu(_("&View"))
        viewMenu.setObjectName("LBViewMenu")

        self.showBlameAction = viewMenu.addAction(_("Show Line &Blame"))
        self.showBlameAction.setObjectName("ShowBlameAction")
        self.showBlameAction.setCheckable(True)
        self.showBlameAction.setChecked(settings.prefs.enabled)
        self.showBlameAction.toggled.connect(self.toggleBlame)

    # -------------------------------------------------------------------------
    # Workspace

    def addWorkspaceRoot(self, path: str):
        path = os.path.normpath(os.path.abspath(path))
        if path not in self.workspaceRoots:
            self.workspaceRoots.append(path)

    def workspaceRootFor(self, path: str) -> str:
        """
        Root folder of the workspace that contains the file: the innermost
        open folder that contains it, or else the working tree of the
        Git repository it lives in, or else its own folder.
        """
        path = os.path.normpath(os.path.abspath(path))

        candidates = [root for root in self.workspaceRoots
                      if path.startswith(os.path.join(root, ""))]
        if candidates:
            return max(candidates, key=len)

        folder = os.path.dirname(path)
        ceilingDirs = os.environ.get("GIT_CEILING_DIRECTORIES") or None

        with suppress(pygit2.GitError):
            repoPath = pygit2.discover_repository(folder, False, ceilingDirs)
            if repoPath:
                repo = pygit2.Repository(repoPath)
                if not repo.is_bare and repo.workdir:
                    return os.path.normpath(repo.workdir)

        return folder

    # -------------------------------------------------------------------------
    # Editors

    def activeEditor(self) -> CodeEditor | None:
        widget = self.tabs.currentWidget()
        return widget if isinstance(widget, CodeEditor) else None

    def editors(self) -> list[CodeEditor]:
        return [self.tabs.widget(i) for i in range(self.tabs.count())]

    def findEditor(self, path: str) -> CodeEditor | None:
        path = os.path.normpath(os.path.abspath(path))
        for editor in self.editors():
            if editor.filePath() == path:
                return editor
        return None

    def openFile(self, path: str, workspaceRoot: str = "") -> CodeEditor:
        editor = self.findEditor(path)
        if editor is not None:
            self.tabs.setCurrentWidget(editor)
            return editor

        editor = CodeEditor(self.tabs)
        editor.load(path, workspaceRoot or self.workspaceRootFor(path))
        return self.addEditor(editor)

    def newFile(self) -> CodeEditor:
        return self.addEditor(CodeEditor(self.tabs))

    def addEditor(self, editor: CodeEditor) -> CodeEditor:
        editor.cursorPositionChanged.connect(lambda: self.selectionChanged.emit(editor))
        editor.document().contentsChange.connect(
            lambda position, removed, added: self.onContentsChange(editor, position, added))
        editor.modificationChanged.connect(lambda: self.refreshTabText(editor))

        index = self.tabs.addTab(editor, editor.displayName())
        self.tabs.setTabToolTip(index, editor.filePath())
        self.tabs.setCurrentWidget(editor)
        editor.setFocus()
        return editor

    def refreshTabText(self, editor: CodeEditor):
        index = self.tabs.indexOf(editor)
        if index < 0:
            return
        text = editor.displayName()
        if editor.isDirty():
            text = "• " + text
        self.tabs.setTabText(index, text)

    def onContentsChange(self, editor: CodeEditor, position: int, charsAdded: int):
        document = editor.document()
        firstLine = document.findBlock(position).blockNumber()
        lastBlock = document.findBlock(position + charsAdded)
        lastLine = lastBlock.blockNumber() if lastBlock.isValid() else document.blockCount() - 1
        self.textEdited.emit(editor, firstLine, max(firstLine, lastLine))

    def onCurrentTabChanged(self, index: int):
        editor = self.activeEditor()
        title = qAppName()
        if editor is not None:
            title = f"{editor.displayName()} – {title}"
        self.setWindowTitle(title)
        self.activeEditorChanged.emit(editor)

    def closeTab(self, index: int):
        editor = self.tabs.widget(index)
        if editor is None:
            return

        if editor.isDirty() and not self.confirmDiscard(editor):
            return

        self.tabs.removeTab(index)
        self.editorClosed.emit(editor)
        editor.deleteLater()

    def confirmDiscard(self, editor: CodeEditor) -> bool:
        result = QMessageBox.question(
            self, _("Unsaved changes"),
            _("Discard unsaved changes to {0}?", tquo(editor.displayName())),
            QMessageBox.StandardButton.Discard | QMessageBox.StandardButton.Cancel)
        return result == QMessageBox.StandardButton.Discard

    def saveCurrentEditor(self):
        editor = self.activeEditor()
        if editor is None:
            return

        path = editor.filePath()
        if not path:
            path, _dummy = QFileDialog.getSaveFileName(self, _("Save File"))
            if not path:
                return

        try:
            self.saveEditor(editor, path)
        except OSError as exc:
            excMessageBox(exc, title=_("Couldn’t save file"), parent=self)

    def saveEditor(self, editor: CodeEditor, path: str = ""):
        oldDocumentId = editor.documentId()

        if path and not editor.filePath():
            editor.setWorkspaceRoot(self.workspaceRootFor(path))

        editor.save(path)

        index = self.tabs.indexOf(editor)
        if index >= 0:
            self.tabs.setTabToolTip(index, editor.filePath())
        self.refreshTabText(editor)

        if editor.documentId() != oldDocumentId:
            logger.debug(f"Renamed {oldDocumentId} -> {editor.documentId()}")
            self.documentRenamed.emit(editor, oldDocumentId)

    # -------------------------------------------------------------------------
    # Dialogs & prefs

    def openFileDialog(self):
        path, _dummy = QFileDialog.getOpenFileName(self, _("Open File"))
        if not path:
            return
        try:
            self.openFile(path)
        except OSError as exc:
            excMessageBox(exc, title=_("Couldn’t open file"), parent=self)

    def openFolderDialog(self):
        path = QFileDialog.getExistingDirectory(self, _("Open Folder"))
        if path:
            self.addWorkspaceRoot(path)

    def toggleBlame(self, enabled: bool):
        from lineblame.application import LBApplication

        if settings.prefs.enabled == enabled:
            return

        settings.prefs.enabled = enabled
        settings.prefs.setDirty()
        settings.prefs.write()
        LBApplication.instance().prefsChanged.emit()
