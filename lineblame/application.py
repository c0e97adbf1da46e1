# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

# Import as few internal modules as possible here to avoid premature initialization
# from cascading imports before the QApplication has booted.
from lineblame.localization import *
from lineblame.qt import *

if TYPE_CHECKING:
    from lineblame.blamecontroller import BlameController
    from lineblame.editor import EditorWindow

logger = logging.getLogger(__name__)


class LBApplication(QApplication):
    prefsChanged = Signal()

    mainWindow: EditorWindow | None
    controller: BlameController | None
    commandLinePaths: list[str]

    @staticmethod
    def instance() -> LBApplication:
        me = QApplication.instance()
        assert isinstance(me, LBApplication)
        return me

    def __init__(self, argv: list[str], bootScriptPath: str = ""):
        super().__init__(argv)
        self.setObjectName("LBApplication")

        if not bootScriptPath and argv:
            bootScriptPath = argv[0]

        self.mainWindow = None
        self.controller = None
        self.commandLinePaths = []

        # Don't use app.setOrganizationName because it changes QStandardPaths.
        self.setApplicationName(APP_SYSTEM_NAME)  # used by QStandardPaths
        self.setApplicationDisplayName(APP_DISPLAY_NAME)  # user-friendly name
        self.setApplicationVersion(APP_VERSION)
        self.setDesktopFileName(APP_IDENTIFIER)

        # Add asset search path relative to boot script
        assetSearchPath = str(Path(bootScriptPath).parent / "assets")
        QDir.addSearchPath("assets", assetSearchPath)

        # Install translators for system language
        # (for command line parser to display localized text)
        self.installTranslators()

        # Process command line
        parser = QCommandLineParser()
        parser.setApplicationDescription(qAppName() + " - " + _("Shows who last changed the line you’re on."))
        parser.addHelpOption()
        parser.addVersionOption()
        parser.addPositionalArgument("paths", _("Files to open, or folders to add to the workspace."), "[paths...]")
        parser.process(argv)

        # Schedule cleanup on quit
        self.aboutToQuit.connect(self.endSession)

        self.commandLinePaths = [str(Path(p).resolve()) for p in parser.positionalArguments()]

    def beginSession(self, bootUi=True):
        from lineblame import settings

        # Load prefs file
        settings.prefs.reset()
        settings.prefs.load()

        self.applyPrefs()

        if bootUi:
            self.bootUi()

    def endSession(self):
        from lineblame import settings

        if settings.prefs.isDirty():
            settings.prefs.write()

    def bootUi(self):
        from lineblame.blamecontroller import BlameController
        from lineblame.editor import EditorWindow

        assert self.mainWindow is None, "already have an EditorWindow"

        self.mainWindow = EditorWindow()
        self.mainWindow.destroyed.connect(self.onMainWindowDestroyed)
        self.controller = BlameController(self.mainWindow, self.mainWindow)

        initialSize = .75 * QApplication.primaryScreen().availableSize()
        self.mainWindow.resize(initialSize)
        self.mainWindow.show()

        # Folders become workspace roots; open files only after all roots are known
        paths = self.commandLinePaths
        self.commandLinePaths = []
        for path in paths:
            if os.path.isdir(path):
                self.mainWindow.addWorkspaceRoot(path)
        for path in paths:
            if os.path.isdir(path):
                continue
            try:
                self.mainWindow.openFile(path)
            except OSError as exc:
                logger.warning(f"Couldn't open {path}: {exc}")

        # Warn about incorrect Qt bindings
        if QT_BINDING_BOOTPREF and QT_BINDING_BOOTPREF.lower() != QT_BINDING.lower():  # pragma: no cover
            text = _("Your preferred Qt binding {0} is not available on this machine. Using {1} instead.",
                     QT_BINDING_BOOTPREF, QT_BINDING)
            QMessageBox.information(self.mainWindow, _("Qt binding unavailable"), text)

    def onMainWindowDestroyed(self):
        logger.debug("Main window destroyed")
        self.mainWindow = None
        self.controller = None

    # -------------------------------------------------------------------------

    def installTranslators(self):
        if APP_TESTMODE:
            # Fall back to English in unit tests regardless of the host machine's locale
            # because many unit tests look for pieces of text in the UI.
            locale = QLocale(QLocale.Language.English)
        else:  # pragma: no cover
            locale = QLocale()

        QLocale.setDefault(locale)

        # Look for a territory-specific file first, then fall back to a
        # generic language file (e.g. 'fr_CA' then 'fr').
        moFilePath = ""
        languageCode = locale.name()
        genericLanguageCode = QLocale.languageToCode(locale.language())
        for stem in languageCode, genericLanguageCode:
            languageFile = QFile(f"assets:lang/{stem}.mo")
            if languageFile.exists():
                moFilePath = languageFile.fileName()
                break

        # If we couldn't find a file, this will fall back to American English.
        installGettextTranslator(moFilePath)

    def applyPrefs(self):
        from lineblame import settings
        from lineblame.gitdriver import GitDriver

        logging.root.setLevel(settings.prefs.verbosity.value)
        GitDriver.setGitPath(settings.prefs.gitPath)
