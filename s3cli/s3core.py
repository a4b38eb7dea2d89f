from xml.etree import ElementTree as ET

from minio import Minio

from s3cli.config import DEFAULT_REGION
from s3cli.logging_utils import get_logger

LOCATION_QUERY_REGION = DEFAULT_REGION

log = get_logger('s3core')


def _endpoint_kwargs(url):
    """
    Minio wants a bare host[:port] and a secure flag, not a url
    """
    secure = not url.startswith('http://')
    slashes = url.find('//')
    if slashes > -1:
        url = url[slashes+2:]
    return {'endpoint': url.rstrip('/'), 'secure': secure}


def get_client(region, settings):
    """
    Get a Minio client bound to region, using the credentials and endpoint
    resolved into settings. Nothing is checked here, a bad region or bad
    credentials only show up when the client is used.
    """
    log.debug(f'Creating S3 client with region: {region}')
    creds = settings.credentials
    kw = _endpoint_kwargs(settings.endpoint)
    kw['access_key'] = creds.access_key or None
    kw['secret_key'] = creds.secret_key or None
    kw['session_token'] = creds.session_token
    kw['region'] = region
    return Minio(**kw)


def get_location_client(settings):
    """
    Get a client for looking up bucket locations. The location query has to be
    sent to one stable region, whatever --region said.
    """
    return get_client(LOCATION_QUERY_REGION, settings)


def bucket_location(client, bucket):
    """
    Ask the server for the location constraint of bucket and return it as sent,
    which is empty for the default region (and may be the legacy ``EU``).

    Minio only does this lookup internally, and answers from its own state
    (the bound region, or us-east-1 for anonymous clients) without asking the
    server, so we send the request ourselves via the lower level request call.
    Error responses come back as S3Error like any other minio call.
    """
    response = client._url_open(method="GET",
                                region=LOCATION_QUERY_REGION,
                                bucket_name=bucket,
                                query_params={"location": ""})
    element = ET.fromstring(response.data.decode())
    return element.text or ""
