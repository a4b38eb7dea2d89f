class S3CliError(Exception):
    """ Base class for errors raised by s3cli itself (storage errors come from minio) """


class UsageError(S3CliError):
    """
    Raised instead of exiting when the command line cannot be parsed:
    unknown or missing command, missing required option, unknown option.
    Carries the usage text of the parser which noticed the problem.
    """
    def __init__(self, message, usage=''):
        super().__init__(message)
        self.usage = usage


class EmptyResponseError(S3CliError):
    """ The storage service answered a download without a body """
