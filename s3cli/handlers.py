"""
The eight storage operations behind the s3cli commands.

Every handler takes its option record, the run settings and (optionally) a
client factory, makes exactly one storage call and returns a
:class:`~s3cli.results.Success` holding the lines to print, or a
:class:`~s3cli.results.Failure`. Nothing is retried, and nothing is rolled back
when a call fails.
"""
from functools import wraps
from io import BytesIO
from pathlib import Path

from minio.error import MinioException
from urllib3.exceptions import HTTPError
from xml.etree import ElementTree as ET

from s3cli.config import DEFAULT_REGION
from s3cli.exceptions import EmptyResponseError
from s3cli.logging_utils import get_logger
from s3cli.results import Success, Failure, FailureKind
from s3cli.s3core import get_client, get_location_client, bucket_location, LOCATION_QUERY_REGION
from s3cli.skin import _i, _e, format_bytes, content_type_of, fmt_date

# minio raises ValueError itself for requests it will not send (e.g. bad bucket names)
API_ERRORS = (MinioException, HTTPError, EmptyResponseError, ValueError, ET.ParseError)

DOWNLOAD_CHUNK = 32 * 1024

log = get_logger('handlers')


def handles(prefix):
    """
    Turn storage and local I/O errors raised by a handler into a Failure whose
    message starts with prefix, which is formatted with the options as ``o``.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(options, settings, client_factory=None):
            try:
                return func(options, settings, client_factory)
            except API_ERRORS as e:
                log.debug(f'[{func.__name__}] storage call failed: {e!r}')
                return Failure(FailureKind.API, f'{prefix.format(o=options)} {e}')
            except OSError as e:
                log.debug(f'[{func.__name__}] local i/o failed: {e!r}')
                return Failure(FailureKind.IO, f'{prefix.format(o=options)} {e}')
        return wrapper
    return decorator


def _client(options, settings, client_factory):
    return (client_factory or get_client)(options.region, settings)


@handles('Error listing buckets:')
def list_buckets(options, settings, client_factory=None):
    """ List every bucket the credentials can see. The region does not filter anything. """
    log.debug(f'Using region parameter: {options.region}')
    client = _client(options, settings, client_factory)
    log.debug('Sending ListBuckets request...')
    buckets = client.list_buckets()
    log.warning('S3 ListBuckets returns ALL buckets regardless of region, '
                'use get-bucket-region to check where a bucket lives')
    lines = [_i('Listing all buckets:')]
    if not buckets:
        lines.append('No buckets found.')
        return Success(lines)
    for n, bucket in enumerate(buckets, start=1):
        lines.append(f'{n}. {_e(bucket.name)} (Created: {fmt_date(bucket.creation_date)})')
    return Success(lines)


@handles('Error getting region for bucket {o.name!r}:')
def get_bucket_region(options, settings, client_factory=None):
    """
    Report the region a bucket lives in. The lookup always goes via us-east-1
    (an injected factory is asked for a us-east-1 client too), and an empty
    location is the service's way of saying us-east-1.
    """
    if client_factory:
        client = client_factory(LOCATION_QUERY_REGION, settings)
    else:
        client = get_location_client(settings)
    log.debug(f'Checking region for bucket: {options.name}')
    region = bucket_location(client, options.name) or DEFAULT_REGION
    return Success([f"Bucket '{_e(options.name)}' is in region: {region}"])


@handles('Error creating bucket:')
def create_bucket(options, settings, client_factory=None):
    """
    Create a bucket in the requested region. The default region must not be sent
    as an explicit location constraint, the service rejects that.
    """
    client = _client(options, settings, client_factory)
    location = None if options.region == DEFAULT_REGION else options.region
    client.make_bucket(bucket_name=options.name, location=location)
    return Success([f"Bucket '{_e(options.name)}' created successfully in region {options.region}."])


@handles('Error deleting bucket:')
def delete_bucket(options, settings, client_factory=None):
    # no emptying first, the service refuses to delete a bucket with contents
    client = _client(options, settings, client_factory)
    client.remove_bucket(bucket_name=options.name)
    return Success([f"Bucket '{_e(options.name)}' deleted successfully."])


@handles('Error listing objects:')
def list_files(options, settings, client_factory=None):
    """ List the objects in a bucket, optionally only those under a key prefix """
    client = _client(options, settings, client_factory)
    objects = list(client.list_objects(bucket_name=options.bucket,
                                       prefix=options.prefix,
                                       recursive=True))
    header = _i('Contents of bucket ') + f"'{_e(options.bucket)}'"
    if options.prefix:
        header += f" with prefix '{options.prefix}'"
    lines = [header + ':']
    if not objects:
        lines.append('No objects found.')
        return Success(lines)
    for n, obj in enumerate(objects, start=1):
        lines.append(f'{n}. {obj.object_name} (Size: {format_bytes(obj.size or 0)}, '
                     f'Last Modified: {fmt_date(obj.last_modified)})')
    return Success(lines)


@handles('Error uploading file:')
def upload_file(options, settings, client_factory=None):
    """
    Upload a local file. The whole file is read into memory and sent in one
    request, under the given key or the file's base name.
    """
    key = options.object_key
    client = _client(options, settings, client_factory)
    data = Path(options.file).read_bytes()
    content_type = content_type_of(options.file)
    log.debug(f'Uploading {len(data)} bytes as {content_type}')
    client.put_object(bucket_name=options.bucket,
                      object_name=key,
                      data=BytesIO(data),
                      length=len(data),
                      content_type=content_type)
    return Success([f"File '{options.file}' uploaded successfully to '{_e(options.bucket)}/{_e(key)}'."])


@handles('Error downloading file:')
def download_file(options, settings, client_factory=None):
    """
    Download an object, streaming the body into the output file (the key's base
    name unless told otherwise). The connection is always handed back, even when
    the copy fails part way.
    """
    client = _client(options, settings, client_factory)
    response = client.get_object(bucket_name=options.bucket, object_name=options.key)
    if response is None:
        raise EmptyResponseError('Empty response body')
    output = options.output_path
    try:
        with open(output, 'wb') as f:
            for chunk in response.stream(DOWNLOAD_CHUNK):
                f.write(chunk)
    finally:
        response.close()
        response.release_conn()
    return Success([f"File downloaded successfully to '{output}'."])


@handles('Error deleting file:')
def delete_file(options, settings, client_factory=None):
    # no existence check, deleting a missing key is not an error for the service
    client = _client(options, settings, client_factory)
    client.remove_object(bucket_name=options.bucket, object_name=options.key)
    return Success([f"File '{options.key}' deleted successfully from bucket '{_e(options.bucket)}'."])
