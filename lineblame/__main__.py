# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import signal
import sys

from lineblame.qt import *


def excepthook(exctype, value, tb):
    sys.__excepthook__(exctype, value, tb)  # run default excepthook

    from lineblame.toolbox import excMessageBox
    excMessageBox(value, printExc=False)


def main():
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.WARNING,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.captureWarnings(True)

    # inject our own exception hook to show an error dialog in case of unhandled exceptions
    # (note that this may get overridden when running under a debugger)
    sys.excepthook = excepthook

    from lineblame.application import LBApplication
    app = LBApplication(sys.argv, __file__)

    # Quit app cleanly on Ctrl+C
    def onSigint(*_dummy):
        QTimer.singleShot(0, app.quit)
    signal.signal(signal.SIGINT, onSigint)

    # Force Python interpreter to run every now and then so it can run the Ctrl+C signal handler
    if __debug__:
        timer = QTimer()
        timer.start(300)
        timer.timeout.connect(lambda: None)

    app.beginSession()

    returnCode = app.exec()
    sys.exit(returnCode)


if __name__ == "__main__":
    main()
