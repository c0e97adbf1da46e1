# -----------------------------------------------------------------------------
# Copyright (C) 2026 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import time

import pytest

from lineblame.toolbox.textutils import *
from . import *

NOW = 1_700_000_000


@pytest.mark.parametrize("delta, expected", [
    (0, "0 seconds ago"),
    (1, "1 second ago"),
    (59, "59 seconds ago"),
    (60, "1 minute ago"),
    (61, "1 minute ago"),
    (3599, "59 minutes ago"),
    (3600, "1 hour ago"),
    (2 * HOUR + 30 * MINUTE, "2 hours ago"),
    (DAY - 1, "23 hours ago"),
    (DAY, "1 day ago"),
    (29 * DAY, "29 days ago"),
    (30 * DAY, "1 month ago"),
    (45 * DAY, "1 month ago"),
    (364 * DAY, "12 months ago"),
    (365 * DAY, "1 year ago"),
    (3 * 365 * DAY + 10, "3 years ago"),
])
def testRelativeTimeBuckets(delta, expected):
    assert relativeTime(NOW - delta, NOW) == expected


def testRelativeTimeInFuture():
    # Clock skew between committer and viewer
    assert relativeTime(NOW + 500, NOW) == "0 seconds ago"


def testRelativeTimeMonotonic():
    units = [MINUTE, HOUR, DAY, MONTH, YEAR]

    def rank(text: str):
        number, unit = text.split()[:2]
        unitIndex = next(i for i, u in enumerate(["second", "minute", "hour", "day", "month", "year"])
                         if unit.startswith(u))
        return unitIndex, int(number)

    deltas = sorted({0, 1, 59} | {u * k + d for u in units for k in (1, 2, 11) for d in (-1, 0, 1)})
    ranks = [rank(relativeTime(NOW - d, NOW)) for d in deltas if d >= 0]
    assert ranks == sorted(ranks)


def testRelativeTimeDefaultsToNow():
    assert relativeTime(int(time.time())) in {"0 seconds ago", "1 second ago"}


def testAbsoluteTimeMatchesLocale():
    dateTime = QDateTime.fromSecsSinceEpoch(NOW)
    assert absoluteTime(NOW) == QLocale().toString(dateTime, QLocale.FormatType.LongFormat)
    assert absoluteTime(NOW, "yyyy") == dateTime.toString("yyyy")
