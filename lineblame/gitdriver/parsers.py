# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging

from lineblame.gitdriver.lineattribution import LineAttribution, UNCOMMITTED_AUTHOR
from lineblame.localization import *
from lineblame.toolbox.benchmark import benchmark

_logger = logging.getLogger(__name__)


def iterateLines(text: str):
    pos = 0
    limit = len(text)

    while pos < limit:
        nextPos = text.find('\n', pos)
        if nextPos < 0:
            nextPos = limit
        else:
            nextPos += 1
        yield pos, nextPos
        pos = nextPos


def parseBlameHeader(stdout: str) -> tuple[str, dict[str, str]]:
    """
    Return the commit hash and the header fields of the first line
    in the output of "git blame --porcelain".

    Only the first occurrence of each field is kept. Parsing stops at the
    first line of file contents (prefixed with a tab), so the contents of
    the blamed line can never be mistaken for a header field.
    """

    commitId = ""
    fields = {}

    for pos, endPos in iterateLines(stdout):
        line = stdout[pos:endPos].rstrip("\r\n")

        if line.startswith("\t"):
            break

        if not commitId:
            # <hash> <orig line> <final line> [<num lines>]
            commitId = line.split(" ", 1)[0]
            continue

        key, _dummy, value = line.partition(" ")
        fields.setdefault(key, value)

    return commitId, fields


@benchmark
def parseGitBlamePorcelain(stdout: str) -> LineAttribution | None:
    """
    Extract the attribution of a single line from "git blame --porcelain".

    Return None if the output has no usable author timestamp.
    """

    commitId, fields = parseBlameHeader(stdout)

    author = fields.get("author") or _("Unknown")
    isUncommitted = author == UNCOMMITTED_AUTHOR

    try:
        authorTime = int(fields["author-time"])
    except KeyError:
        _logger.debug("No author-time in blame output")
        return None
    except ValueError:
        _logger.debug(f"Unparseable author-time in blame output: {fields['author-time']}")
        return None

    if isUncommitted:
        author = _("You")
        summary = _("Uncommitted changes")
    else:
        summary = fields.get("summary", "")

    return LineAttribution(
        author=author,
        authorTime=authorTime,
        summary=summary,
        isUncommitted=isUncommitted,
        commitId=commitId)
