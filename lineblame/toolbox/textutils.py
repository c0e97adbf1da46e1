# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import time

from lineblame.localization import *
from lineblame.qt import *

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY
YEAR = 365 * DAY


def relativeTime(timestamp: int, now: float | None = None) -> str:
    """
    Coarse "N units ago" text for a Unix timestamp (seconds since epoch).

    Months and years are fixed 30-day and 365-day buckets, not calendar-aware.
    """

    if now is None:
        now = time.time()

    seconds = max(0, int(now - timestamp))

    if seconds < MINUTE:
        return _n("{n} second ago", "{n} seconds ago", seconds)
    elif seconds < HOUR:
        return _n("{n} minute ago", "{n} minutes ago", seconds // MINUTE)
    elif seconds < DAY:
        return _n("{n} hour ago", "{n} hours ago", seconds // HOUR)
    elif seconds < MONTH:
        return _n("{n} day ago", "{n} days ago", seconds // DAY)
    elif seconds < YEAR:
        return _n("{n} month ago", "{n} months ago", seconds // MONTH)
    else:
        return _n("{n} year ago", "{n} years ago", seconds // YEAR)


def absoluteTime(timestamp: int, format: str | QLocale.FormatType = QLocale.FormatType.LongFormat) -> str:
    """ Localized date and time for a Unix timestamp, in the local time zone. """
    dateTime = QDateTime.fromSecsSinceEpoch(timestamp)
    return QLocale().toString(dateTime, format)


def tquo(text: str) -> str:
    """ Quote plain text with language-dependent typographic quotes. """
    return _("“{0}”").format(text)
