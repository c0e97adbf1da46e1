# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from pathlib import Path

from lineblame import settings
from lineblame.decoration import Decoration, DecorationKind
from lineblame.qt import *

logger = logging.getLogger(__name__)


class CodeEditor(QPlainTextEdit):
    """
    Plain-text editor for a single document.

    Besides the text itself, the editor paints "decorations": short runs
    of text anchored past the end of a line, which aren't part of the
    document and can't be selected or edited.
    """

    _untitledSerial = 0

    _path: str
    _workspaceRoot: str
    _untitledId: str
    _decorations: dict[DecorationKind, list[Decoration]]

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("CodeEditor")

        self._path = ""
        self._workspaceRoot = ""
        self._decorations = {}

        CodeEditor._untitledSerial += 1
        self._untitledId = f"untitled:{CodeEditor._untitledSerial}"

        self.setFont(settings.prefs.monoFont())
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

    def __repr__(self):
        return f"CodeEditor({self.documentId()})"

    # -------------------------------------------------------------------------
    # Document

    def load(self, path: str, workspaceRoot: str = ""):
        path = os.path.normpath(os.path.abspath(path))
        text = Path(path).read_text(encoding="utf-8", errors="replace")

        self._path = path
        self._workspaceRoot = os.path.normpath(workspaceRoot) if workspaceRoot else ""
        self.setPlainText(text)
        self.document().setModified(False)

    def save(self, path: str = ""):
        if path:
            self._path = os.path.normpath(os.path.abspath(path))
        assert self._path, "can't save an untitled document without a path"

        Path(self._path).write_text(self.toPlainText(), encoding="utf-8")
        self.document().setModified(False)
        logger.info(f"Saved {self._path}")

    def documentId(self) -> str:
        if self._path:
            return QUrl.fromLocalFile(self._path).toString()
        return self._untitledId

    def filePath(self) -> str:
        return self._path

    def displayName(self) -> str:
        return os.path.basename(self._path) or self._untitledId

    def workspaceRoot(self) -> str:
        return self._workspaceRoot

    def setWorkspaceRoot(self, root: str):
        self._workspaceRoot = root

    def isDirty(self) -> bool:
        return self.document().isModified()

    def cursorLine(self) -> int:
        """ 0-based line number of the primary cursor. """
        return self.textCursor().blockNumber()

    def lineLength(self, lineNumber: int) -> int:
        block = self.document().findBlockByNumber(lineNumber)
        if not block.isValid():
            return 0
        return len(block.text())

    # -------------------------------------------------------------------------
    # Decorations

    def setDecorations(self, kind: DecorationKind, decorations: list[Decoration]):
        """ Replace all decorations of the given kind in one go. """
        if decorations:
            self._decorations[kind] = list(decorations)
        else:
            self._decorations.pop(kind, None)
        self.viewport().update()

    def decorations(self, kind: DecorationKind) -> list[Decoration]:
        return list(self._decorations.get(kind, []))

    def decorationRect(self, kind: DecorationKind, decoration: Decoration) -> QRect:
        """ Where the decoration is painted, in viewport coordinates. """
        block = self.document().findBlockByNumber(decoration.line)
        if not block.isValid() or not block.isVisible():
            return QRect()

        cursor = QTextCursor(block)
        column = min(decoration.column, block.length() - 1)
        cursor.setPosition(block.position() + column)
        anchor = self.cursorRect(cursor)

        fontMetrics = self.fontMetrics()
        margin = round(kind.margin * fontMetrics.horizontalAdvance("M"))
        width = fontMetrics.horizontalAdvance(decoration.text) + 1
        return QRect(anchor.right() + margin, anchor.top(), width, anchor.height())

    def decorationAt(self, pos: QPoint) -> Decoration | None:
        for kind, decorations in self._decorations.items():
            for decoration in decorations:
                if self.decorationRect(kind, decoration).contains(pos):
                    return decoration
        return None

    def paintEvent(self, event: QPaintEvent):
        super().paintEvent(event)

        if not self._decorations:
            return

        painter = QPainter(self.viewport())
        painter.setFont(self.font())
        align = Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        for kind, decorations in self._decorations.items():
            painter.setPen(QColor(kind.color))
            for decoration in decorations:
                rect = self.decorationRect(kind, decoration)
                if rect.isValid() and rect.intersects(event.rect()):
                    painter.drawText(rect, align, decoration.text)

        painter.end()

    def viewportEvent(self, event: QEvent):
        if event.type() == QEvent.Type.ToolTip:
            assert isinstance(event, QHelpEvent)
            decoration = self.decorationAt(event.pos())
            if decoration is not None and decoration.hover:
                QToolTip.showText(event.globalPos(), decoration.hover, self.viewport())
            else:
                QToolTip.hideText()
                event.ignore()
            return True

        return super().viewportEvent(event)
