# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
import logging
import os
import shlex
from collections.abc import Generator
from pathlib import Path
from typing import Any, TYPE_CHECKING

from lineblame.gitdriver import GitDriver, LineAttribution
from lineblame.localization import *
from lineblame.qt import *
from lineblame.toolbox import *

if TYPE_CHECKING:
    from lineblame.editor.codeeditor import CodeEditor
    from lineblame.repodetector import RepoDetector

logger = logging.getLogger(__name__)


class FlowControlToken:
    """
    Object that can be yielded from `RefreshTask.flow()` to control the flow of the coroutine.
    """

    class Kind(enum.IntEnum):
        ContinueOnUiThread = enum.auto()
        WaitProcessReady = enum.auto()
        InterruptedByException = enum.auto()

    flowControl: Kind
    exception: BaseException | None

    def __init__(self, flowControl: Kind = Kind.ContinueOnUiThread, exception=None):
        self.flowControl = flowControl
        self.exception = exception

    def __str__(self):
        return F"FlowControlToken({self.flowControl.name})"


FlowControlToken.BootstrapFlow = FlowControlToken()


class AbortRefresh(Exception):
    """ Raise this to bail from a refresh coroutine when there's no blame to
    show for the line (no repository, untracked file, line out of range...).
    This is a routine outcome, so it never reaches the user as an error. """


class RefreshTask(QObject):
    """
    Fetches the attribution of a single line of a document.

    The work happens in the `flow()` coroutine, which is driven by
    RefreshTaskRunner. The coroutine is suspended while git is running,
    so the UI thread stays free to process other events.
    """

    uiReady = Signal()

    FlowGeneratorType = Generator[FlowControlToken, Any, LineAttribution | None]

    editor: CodeEditor
    documentId: str
    lineNumber: int
    "0-based line number at the time the task was launched"

    result: LineAttribution | None
    exception: BaseException | None

    def __init__(self, parent: QObject, editor: CodeEditor, lineNumber: int, detector: RepoDetector):
        super().__init__(parent)
        self.setObjectName("RefreshTask")

        self.editor = editor
        self.documentId = editor.documentId()
        self.filePath = editor.filePath()
        self.workspaceRoot = editor.workspaceRoot()
        self.lineNumber = lineNumber
        self.detector = detector

        self.result = None
        self.exception = None
        self._currentFlow = None
        self._currentProcess = None

    def __str__(self):
        name = os.path.basename(self.filePath) or self.documentId
        return f"RefreshTask({name}:{self.lineNumber + 1})"

    @property
    def currentProcess(self) -> QProcess | None:
        return self._currentProcess

    def flow(self) -> FlowGeneratorType:
        root = self.workspaceRoot
        path = self.filePath

        if not root or not path:
            raise AbortRefresh("document isn't part of a workspace")

        if not Path(path).is_relative_to(root):
            raise AbortRefresh(f"document is outside workspace root {root}")
        relativePath = Path(path).relative_to(root).as_posix()

        isRepo = yield from self.detector.flowIsUnderVersionControl(self, root)
        if not isRepo:
            raise AbortRefresh(f"not under version control: {root}")

        blameCommand = GitDriver.buildBlameCommand(self.lineNumber + 1, relativePath)
        driver = yield from self.flowCallGit(*blameCommand, workdir=root)

        attribution = driver.readBlamePorcelain()
        if attribution is None:
            raise AbortRefresh("blame output has no author time")

        return attribution

    def flowStartProcess(self, process: QProcess, autoFail=True) -> Generator[FlowControlToken, None, None]:
        assert onAppThread(), "start processes from UI thread"
        assert self._currentProcess is None, "a process is already running in this task"

        self._currentProcess = process
        processWrapper = ProcessWrapper(process, self)
        processWrapper.continueCoroutine.connect(self.uiReady)

        try:
            yield from processWrapper.coStart()
            yield from processWrapper.coWaitDone(autoFail)
        finally:
            self._currentProcess = None
            processWrapper.deleteLater()

    def flowCallGit(
            self,
            *args: str,
            workdir="",
            env: dict[str, str] | None = None,
            autoFail=True,
    ) -> Generator[FlowControlToken, None, GitDriver]:
        env = env or {}

        # Force Git output in English (so that we can recognize sentinel values)
        env["LC_ALL"] = "C.UTF-8"

        process = GitDriver(*args, parent=self)
        if workdir:
            process.setWorkingDirectory(workdir)

        processEnvironment = QProcessEnvironment.systemEnvironment()
        for k, v in env.items():
            processEnvironment.insert(k, v)
        process.setProcessEnvironment(processEnvironment)

        yield from self.flowStartProcess(process, autoFail=autoFail)
        return process


class RefreshTaskRunner(QObject):
    """
    Drives RefreshTask coroutines on the UI thread.

    Unlike a job queue, several tasks may be in flight at once (e.g. for
    different documents); each one is resumed independently whenever its
    git process changes state.
    """

    taskFinished = Signal(RefreshTask)
    processStarted = Signal(QProcess, str)

    _tasks: list[RefreshTask]

    def __init__(self, parent: QObject):
        super().__init__(parent)
        self.setObjectName("RefreshTaskRunner")
        self._tasks = []

    def isBusy(self) -> bool:
        return bool(self._tasks)

    def put(self, task: RefreshTask):
        assert onAppThread()

        # Get flow generator
        task._currentFlow = task.flow()
        assert isinstance(task._currentFlow, Generator), "flow() must contain at least one yield statement"

        logger.debug(f">>> {task}")
        self._tasks.append(task)

        # When the task is ready, continue the coroutine
        task.uiReady.connect(lambda: self._continueFlow(task))

        # Start the coroutine
        self._continueFlow(task)

    def _continueFlow(self, task: RefreshTask, token: FlowControlToken = FlowControlToken.BootstrapFlow):
        while token is not None:
            token = self._processToken(task, token)

    def _processToken(self, task: RefreshTask, token: FlowControlToken) -> FlowControlToken | None:
        assert not isinstance(token, Generator), \
            "You're trying to yield a nested generator. Did you mean 'yield from'?"
        assert isinstance(token, FlowControlToken), \
            f"In a RefreshTask coroutine, you can only yield FlowControlToken. You yielded: {type(token).__name__}"
        assert onAppThread(), "_processToken must be called on UI thread"
        assert task in self._tasks, f"{task} isn't tracked by this runner"

        flow = task._currentFlow
        assert flow is not None

        tk = token.flowControl
        TK = FlowControlToken.Kind

        if tk == TK.ContinueOnUiThread:
            # Get next continuation token on this thread then loop to beginning of _continueFlow.
            return RefreshTaskRunner._getNextToken(flow)

        elif tk == TK.WaitProcessReady:
            # When the process changes state, task.uiReady will fire, and we'll re-enter _continueFlow.
            # Broadcast process start at most once.
            process = task.currentProcess
            if process is not None and not getattr(process, "_runnerBroadcastYet", False):
                process._runnerBroadcastYet = True
                self.processStarted.emit(process, str(task))

        elif tk == TK.InterruptedByException:
            exception = token.exception
            assert exception is not None, "FlowControlToken(InterruptedByException) must provide an exception!"

            self._releaseTask(task)

            if isinstance(exception, StopIteration):
                # No more steps in the flow. Task completed successfully.
                task.result = exception.value
            else:
                task.exception = exception

            # Emit taskFinished whether the task succeeded or not
            self.taskFinished.emit(task)
            task.deleteLater()

        else:
            raise NotImplementedError(f"Unsupported FlowControlToken {token.flowControl}")

        return None

    @staticmethod
    def _getNextToken(flow: RefreshTask.FlowGeneratorType) -> FlowControlToken:
        try:
            token = next(flow)
        except BaseException as exception:
            token = FlowControlToken(FlowControlToken.Kind.InterruptedByException, exception)
        return token

    def _releaseTask(self, task: RefreshTask):
        logger.debug(f"<<< {task}")
        self._tasks.remove(task)
        task.uiReady.disconnect()
        task._currentFlow = None


class ProcessWrapper(QObject):
    continueCoroutine = Signal()

    def __init__(self, process: QProcess, parent):
        super().__init__(parent)
        self.process = process
        self._didStart = False

    def _onStarted(self):
        self._didStart = True

    def coStart(self):
        process = self.process
        logger.info(f"Starting process (from {process.workingDirectory()}): {self.formatCommand()}")

        with QSignalConnectContext(process.started, self._onStarted):
            process.start()

            if not self._didStart and process.state() == QProcess.ProcessState.Starting:
                # Pause coroutine until process emits either started or errorOccurred
                with (
                    QSignalConnectContext(process.started, self.continueCoroutine),
                    QSignalConnectContext(process.errorOccurred, self.continueCoroutine),
                ):
                    yield FlowControlToken(FlowControlToken.Kind.WaitProcessReady)

        if not self._didStart:
            raise AbortRefresh(_("Couldn’t start process ({0}): {1}", process.error(), self.formatCommand()))

    def coWaitDone(self, autoFail=True):
        process = self.process
        assert self._didStart

        if process.state() != QProcess.ProcessState.NotRunning:
            # Pause coroutine until process exits Running state
            with QSignalConnectContext(process.stateChanged, self.continueCoroutine):
                yield FlowControlToken(FlowControlToken.Kind.WaitProcessReady)

        assert process.state() != QProcess.ProcessState.Running
        exitCode = process.exitCode()

        if autoFail and (exitCode != 0 or process.exitStatus() != QProcess.ExitStatus.NormalExit):
            if isinstance(process, GitDriver):
                message = process.errorText()
            else:
                message = _("Process {0} exited with code {1}.", process.program(), exitCode)
            raise AbortRefresh(message)

    def formatCommand(self):
        process = self.process
        return shlex.join([process.program()] + process.arguments())
