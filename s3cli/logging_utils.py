import logging
import sys
import os

from s3cli.skin import ColourFormatter


def get_logger(name: str = None, level: int = None) -> logging.Logger:
    """
    Return a consistent logger instance.

    - Loggers live under the ``s3cli`` hierarchy, only the root ``s3cli`` logger gets a handler.
    - The handler writes to stderr so that command output on stdout can be piped.
    - Under pytest, logs are captured by pytest; no handlers are added or removed.
    - Always propagates so higher-level frameworks can capture messages.
    """
    root = logging.getLogger('s3cli')
    if level is not None:
        root.setLevel(level)

    under_pytest = "PYTEST_CURRENT_TEST" in os.environ

    if not under_pytest and len(root.handlers) == 0:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColourFormatter('%(levelname)s: %(message)s'))
        root.addHandler(handler)

    root.propagate = True

    if name is None or name == 's3cli':
        return root
    return logging.getLogger(f's3cli.{name}')


def configure(verbose=False):
    """ Set the level for a command line run, and quieten the http layer """
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)
    return get_logger(level=logging.DEBUG if verbose else logging.WARNING)
