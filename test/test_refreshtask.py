# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import pytest

from lineblame.editor import CodeEditor
from lineblame.repodetector import RepoDetector
from lineblame.tasks import AbortRefresh, RefreshTask, RefreshTaskRunner
from .util import *


class GitVersionTask(RefreshTask):
    def flow(self):
        driver = yield from self.flowCallGit("--version")
        return driver.stdoutScrollback()


class FailingTask(RefreshTask):
    def flow(self):
        yield from self.flowCallGit("rev-parse", "--git-dir", workdir=self.workspaceRoot)
        return "unreachable"


class BrokenTask(RefreshTask):
    def flow(self):
        yield from self.flowCallGit("--version")
        raise KeyError("boom")


@pytest.fixture
def runner(qtbot) -> RefreshTaskRunner:
    parent = QObject()
    runner = RefreshTaskRunner(parent)
    yield runner
    parent.deleteLater()


@pytest.fixture
def editor(qtbot) -> CodeEditor:
    editor = CodeEditor()
    qtbot.addWidget(editor)
    return editor


def runTask(qtbot, runner, task) -> RefreshTask:
    with qtbot.waitSignal(runner.taskFinished, timeout=5000) as blocker:
        runner.put(task)
    assert blocker.args == [task]
    return task


def testTaskResult(qtbot, runner, editor):
    task = runTask(qtbot, runner, GitVersionTask(runner, editor, 0, RepoDetector()))
    assert task.exception is None
    assert task.result.startswith("git version")
    assert not runner.isBusy()


def testTaskAbortsWhenGitFails(qtbot, runner, editor, tempDir):
    editor.setWorkspaceRoot(tempDir.name)
    task = runTask(qtbot, runner, FailingTask(runner, editor, 0, RepoDetector()))
    assert task.result is None
    assert isinstance(task.exception, AbortRefresh)
    assert "exited with code" in str(task.exception)


def testTaskAbortsWhenGitIsMissing(qtbot, runner, editor):
    from lineblame.gitdriver import GitDriver
    GitDriver.setGitPath("/nonexistent/lineblame-git")

    task = runTask(qtbot, runner, GitVersionTask(runner, editor, 0, RepoDetector()))
    assert isinstance(task.exception, AbortRefresh)
    assert "/nonexistent/lineblame-git" in str(task.exception)


def testUnexpectedExceptionIsCaptured(qtbot, runner, editor):
    task = runTask(qtbot, runner, BrokenTask(runner, editor, 0, RepoDetector()))
    assert isinstance(task.exception, KeyError)


def testUntitledDocumentAbortsWithoutGit(qtbot, runner, editor):
    started = []
    runner.processStarted.connect(lambda process, name: started.append(process.arguments()))

    task = RefreshTask(runner, editor, 0, RepoDetector())
    task = runTask(qtbot, runner, task)
    assert isinstance(task.exception, AbortRefresh)
    assert started == []


def testConcurrentTasks(qtbot, runner, editor):
    finished = []
    runner.taskFinished.connect(finished.append)

    started = []
    runner.processStarted.connect(lambda process, name: started.append(name))

    tasks = [GitVersionTask(runner, editor, i, RepoDetector()) for i in range(3)]
    for task in tasks:
        runner.put(task)
    assert runner.isBusy()

    waitUntilTrue(lambda: len(finished) == 3)
    assert set(finished) == set(tasks)
    assert all(task.result.startswith("git version") for task in tasks)
    assert len(started) == 3
    assert not runner.isBusy()
