# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from lineblame import settings
from lineblame.gitdriver import LineAttribution
from lineblame.toolbox import *

if TYPE_CHECKING:
    from lineblame.editor.codeeditor import CodeEditor

logger = logging.getLogger(__name__)

BULLET = "•"


@dataclasses.dataclass(frozen=True)
class DecorationKind:
    """ Visual style shared by all annotations of one kind. """

    margin: float = 2.0
    "Gap between the end of the line and the annotation, in ems"

    color: str = "#99999999"
    "Text color, in a format that QColor understands (#AARRGGBB)"


@dataclasses.dataclass(frozen=True)
class Decoration:
    line: int
    "0-based line number"

    column: int
    "Anchor column; the end of the line for trailing annotations"

    text: str
    hover: str = ""


class DecorationRenderer:
    kind: DecorationKind

    def __init__(self, kind: DecorationKind | None = None):
        self.kind = kind or DecorationRenderer.makeDecorationKind()

    @staticmethod
    def makeDecorationKind() -> DecorationKind:
        prefs = settings.prefs
        return DecorationKind(margin=prefs.annotationMargin, color=prefs.annotationColor)

    @staticmethod
    def composeText(attribution: LineAttribution, now: int | None = None) -> str:
        text = attribution.author

        if not attribution.isUncommitted:
            text += ", " + relativeTime(attribution.authorTime, now)

        if attribution.summary:
            text += f" {BULLET} {attribution.summary}"

        return text

    @staticmethod
    def composeHover(attribution: LineAttribution) -> str:
        if attribution.isUncommitted or not settings.prefs.showHover:
            return ""
        return absoluteTime(attribution.authorTime, settings.prefs.hoverFormat())

    def makeDecoration(self, editor: CodeEditor, lineNumber: int, attribution: LineAttribution) -> Decoration:
        return Decoration(
            line=lineNumber,
            column=editor.lineLength(lineNumber),
            text=self.composeText(attribution),
            hover=self.composeHover(attribution))

    def render(self, editor: CodeEditor, lineNumber: int, attribution: LineAttribution | None):
        """
        Show the annotation for the given line, replacing any annotation
        previously shown in this editor. Clear the editor's annotation
        if the attribution is missing or unusable.
        """
        if attribution is None or not attribution.isUsable:
            self.clear(editor)
            return

        decoration = self.makeDecoration(editor, lineNumber, attribution)
        editor.setDecorations(self.kind, [decoration])

    def clear(self, editor: CodeEditor):
        editor.setDecorations(self.kind, [])
