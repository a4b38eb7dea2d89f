import time
import uuid
import pytest
import subprocess
import logging
from unittest.mock import MagicMock

from cmd2 import ansi
from minio import Minio
from urllib3 import HTTPResponse

from s3cli.config import Settings, Credentials


MINIO_IMAGE = "quay.io/minio/minio:latest"
ACCESS_KEY = "minioadmin"
SECRET_KEY = "minioadmin"
MINIO_PORT = 9000


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    """ No ANSI styling in anything written out during tests """
    monkeypatch.setattr(ansi, 'allow_style', ansi.AllowStyle.NEVER)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """ Make sure credentials from the developer's shell never leak into a test """
    for var in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY",
                "AWS_SESSION_TOKEN", "AWS_ENDPOINT_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def silence_noisy_loggers():
    """Silence chatty third-party loggers"""
    logging.getLogger('urllib3.connectionpool').setLevel(logging.WARNING)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """ Run in an empty directory, so no stray .env is picked up and downloads land here """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings():
    return Settings(region="us-east-1",
                    credentials=Credentials("an-access-key", "a-secret-key"))


@pytest.fixture
def mock_client():
    client = MagicMock(spec=Minio)
    client.list_buckets.return_value = []
    client.list_objects.return_value = iter([])
    return client


@pytest.fixture
def factory(mock_client):
    """ A client factory which always hands out mock_client """
    return MagicMock(return_value=mock_client)



@pytest.fixture
def s3_http(mocker, monkeypatch):
    """
    Stand in for the http layer under minio, so real clients can be used
    without a server. Set the return_value (see http_reply) or side_effect.
    """
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy"):
        monkeypatch.delenv(var, raising=False)
    return mocker.patch("urllib3.PoolManager.urlopen")


@pytest.fixture
def http_reply():
    """ Build an XML reply as the storage service would send it """
    def reply(body, status=200):
        return HTTPResponse(body=body.encode(), status=status,
                            headers={"Content-Type": "application/xml"},
                            preload_content=True)
    return reply


def _cleanup_old_minio():
    """Remove any leftover MinIO containers from previous runs."""
    try:
        result = subprocess.run(
            ["docker", "ps", "-a", "--filter", "name=s3cli-minio-test", "--format", "{{.ID}}"],
            check=False,
            capture_output=True,
            text=True,
        )
        ids = result.stdout.strip().splitlines()
        if ids:
            subprocess.run(["docker", "rm", "-f"] + ids, check=False)
    except OSError as e:
        print(f"Warning: cleanup failed: {e}")


@pytest.fixture(scope="session")
def minio_service():
    """Run a temporary MinIO server in Docker and return a configured client."""
    docker = pytest.importorskip("docker")
    try:
        client = docker.from_env()
        client.ping()
    except docker.errors.DockerException as e:
        pytest.skip(f"docker is not available: {e}")

    _cleanup_old_minio()

    container = client.containers.run(
        MINIO_IMAGE,
        command=["server", "/data"],
        environment={
            "MINIO_ROOT_USER": ACCESS_KEY,
            "MINIO_ROOT_PASSWORD": SECRET_KEY,
        },
        ports={f"{MINIO_PORT}/tcp": MINIO_PORT},
        detach=True,
        remove=True,
        name=f"s3cli-minio-test-{uuid.uuid4()}",
    )

    endpoint = f"localhost:{MINIO_PORT}"
    minio_client = Minio(endpoint=endpoint, access_key=ACCESS_KEY, secret_key=SECRET_KEY, secure=False)

    for _ in range(30):  # up to ~15 seconds
        try:
            minio_client.list_buckets()
            break
        except Exception:
            time.sleep(0.5)
    else:
        logs = container.logs().decode()
        container.stop()
        pytest.fail(f"MinIO did not start in time. Logs:\n{logs}")

    yield minio_client

    container.stop()


@pytest.fixture
def minio_environ(minio_service):
    """ Environment variables pointing s3cli at the docker MinIO server """
    return {
        "AWS_ACCESS_KEY_ID": ACCESS_KEY,
        "AWS_SECRET_ACCESS_KEY": SECRET_KEY,
        "AWS_ENDPOINT_URL": f"http://localhost:{MINIO_PORT}",
    }
