"""
Settings for a single s3cli run.

Everything the storage client needs (region, endpoint and credentials) is
gathered once, from the process environment and any dotenv files, into an
immutable :class:`Settings` record which is then passed explicitly to the
client factory. The process environment itself is never modified.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple
import os

from dotenv import dotenv_values

from s3cli.logging_utils import get_logger

DEFAULT_REGION = "us-east-1"
DEFAULT_ENV_FILE = ".env"
DEFAULT_ENDPOINT = "https://s3.amazonaws.com"

log = get_logger('config')


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class Settings:
    region: str
    credentials: Credentials
    endpoint: str = DEFAULT_ENDPOINT
    env_file: Optional[str] = None
    loaded_files: Tuple[str, ...] = ()


def _read_dotenv(path):
    """ Values from one dotenv file, skipping keys declared without a value """
    return {k: v for k, v in dotenv_values(path).items() if v is not None}


def read_environment(env_file=None, environ: Optional[Mapping[str, str]] = None):
    """
    Build the variable mapping used for credential resolution.

    Starts from ``environ`` (a copy of ``os.environ`` by default). The default
    ``.env`` file only fills in variables which are not already set. An explicit
    ``env_file`` (even ``.env`` itself) is loaded afterwards and its values win
    over everything else.

    Returns:
        (dict, list): the merged variables and the files which were actually read.
    """
    variables = dict(os.environ) if environ is None else dict(environ)
    loaded = []

    default = Path(DEFAULT_ENV_FILE)
    if default.is_file():
        for k, v in _read_dotenv(default).items():
            variables.setdefault(k, v)
        loaded.append(str(default))
        log.debug(f'Loaded environment from: {default}')

    if env_file is not None:
        path = Path(env_file)
        if path.is_file():
            variables.update(_read_dotenv(path))
            if str(path) not in loaded:
                loaded.append(str(path))
            log.info(f'Loaded environment from: {path}')
        else:
            log.warning(f'Environment file {path} not found, ignoring it')

    return variables, loaded


def resolve_credentials(variables: Mapping[str, str]) -> Credentials:
    """
    Pick the access and secret keys (and optional session token) out of the
    variables. Absent keys are not an error here, the storage service will
    reject the request later.
    """
    return Credentials(
        access_key=variables.get("AWS_ACCESS_KEY_ID", ""),
        secret_key=variables.get("AWS_SECRET_ACCESS_KEY", ""),
        session_token=variables.get("AWS_SESSION_TOKEN") or None,
    )


def load_settings(region=DEFAULT_REGION, env_file=None, environ=None) -> Settings:
    """ Resolve everything needed to build a storage client for this run """
    variables, loaded = read_environment(env_file, environ)
    return Settings(
        region=region,
        credentials=resolve_credentials(variables),
        endpoint=variables.get("AWS_ENDPOINT_URL") or DEFAULT_ENDPOINT,
        env_file=env_file,
        loaded_files=tuple(loaded),
    )
