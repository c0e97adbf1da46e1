# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import traceback
from collections.abc import Callable

from lineblame.localization import *
from lineblame.qt import *

logger = logging.getLogger(__name__)


def onAppThread():
    appInstance = QApplication.instance()
    return bool(appInstance and appInstance.thread() is QThread.currentThread())


class CallbackAccumulator(QTimer):
    """
    Single-shot timer that coalesces bursts of calls into a single callback.
    Restarting the timer cancels the previous pending fire.
    """

    def __init__(self, parent: QObject, callback: Callable, delay: int = 0):
        super().__init__(parent)
        self.setObjectName("CallbackAccumulator")
        self.setSingleShot(True)
        self.setInterval(delay)
        self.timeout.connect(callback)


def excMessageBox(exc: BaseException, title: str = "", printExc: bool = True, parent: QWidget | None = None):
    if printExc:
        traceback.print_exception(exc.__class__, exc, exc.__traceback__)

    # Don't pop up a message box if the app isn't running
    if not QApplication.instance():
        return

    title = title or _("Unhandled exception")
    summary = traceback.format_exception_only(exc.__class__, exc)
    details = "".join(traceback.format_exception(exc.__class__, exc, exc.__traceback__))

    qmb = QMessageBox(QMessageBox.Icon.Critical, title, "".join(summary).strip(), parent=parent)
    qmb.setDetailedText(details)
    qmb.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)

    if APP_TESTMODE:
        logger.error(f"{title}: {details}")
    else:  # pragma: no cover
        qmb.show()
