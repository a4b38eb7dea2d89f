from cmd2 import Fg, ansi
from pathlib import PurePath
import logging
import math

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".txt": "text/plain",
    ".pdf": "application/pdf",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def __style(string, col):
    """ Colour a string with a particular style """
    return ansi.style(string, fg=Fg[col.upper()])

def _i(string, col='green'):
    """ Info string """
    return __style(string,col)

def _e(string, col='blue'):
    """ Entity string """
    return __style(string,col)

def _err(string,col='red'):
    return __style(string,col)

def _log(string,col='cyan'):
    return __style(string,col)

def _warn(string,col='yellow'):
    return __style(string,col)


def format_bytes(num, decimals=2):
    """
    Take a byte count and humanize it, using the largest unit for which
    the scaled value stays below 1024 (``1536 -> '1.5 KB'``).
    Trailing zeros are dropped, and zero is always ``0 Bytes``.
    """
    if num == 0:
        return "0 Bytes"
    if num < 0:
        raise ValueError(f'Cannot format a negative byte count ({num})')
    dm = max(0, decimals)
    i = int(math.floor(math.log(num) / math.log(1024)))
    i = min(max(i, 0), len(SIZE_UNITS) - 1)
    value = f"{num / 1024 ** i:.{dm}f}"
    if '.' in value:
        value = value.rstrip('0').rstrip('.')
    return f"{value} {SIZE_UNITS[i]}"


def content_type_of(path):
    """ MIME type for an upload, from the (case insensitive) file extension """
    return CONTENT_TYPES.get(PurePath(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def fmt_date(adate):
    """ Take the reported date and humanize it"""
    if adate is None:
        return 'unknown'
    return adate.strftime('%Y-%m-%d %H:%M:%S %Z').strip()


class ColourFormatter(logging.Formatter):
    def format(self, record):
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return _err(message)
        elif record.levelno >= logging.WARNING:
            return _warn(message)
        else:
            return _log(message)
