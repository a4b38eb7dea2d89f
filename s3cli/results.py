from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from cmd2 import ansi

from s3cli.skin import _err


class FailureKind(Enum):
    USAGE = 'usage'
    API = 'api'
    IO = 'io'


@dataclass(frozen=True)
class Success:
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    usage: str = ''


Result = Union[Success, Failure]


def report(result, stdout, stderr):
    """
    Write a handler result out and return the process exit code: every success
    line goes to stdout (0), a failure goes to stderr (1), preceded by the
    usage text when the command line itself was the problem.
    """
    if isinstance(result, Success):
        for line in result.lines:
            ansi.style_aware_write(stdout, line + '\n')
        return 0
    if result.usage:
        ansi.style_aware_write(stderr, result.usage.rstrip('\n') + '\n')
    ansi.style_aware_write(stderr, _err(result.message) + '\n')
    return 1
