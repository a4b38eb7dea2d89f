#! /usr/bin/env python
"""
Command line entry point: parse the arguments, resolve settings, run exactly
one handler and turn its result into output and an exit code.
"""
import argparse
import sys

import cmd2
from cmd2 import ansi

from s3cli import __version__
from s3cli import handlers, options
from s3cli.config import load_settings, DEFAULT_REGION, DEFAULT_ENV_FILE
from s3cli.exceptions import UsageError
from s3cli.logging_utils import configure
from s3cli.results import Failure, FailureKind, report


class CliArgumentParser(cmd2.Cmd2ArgumentParser):
    """
    Argument parser which raises UsageError rather than exiting with status 2,
    so the dispatcher decides what a usage problem means. Sub-command parsers
    are created with the same class, so they behave the same way.
    """
    def error(self, message):
        raise UsageError(message, usage=self.format_usage())


# command name -> (handler, option record, help, [(option, help, required)])
COMMANDS = {
    'list-buckets': (handlers.list_buckets, options.ListBucketsOptions,
                     'List all S3 buckets', []),
    'get-bucket-region': (handlers.get_bucket_region, options.GetBucketRegionOptions,
                          'Get the region of a specific bucket',
                          [('name', 'Name of the bucket', True)]),
    'create-bucket': (handlers.create_bucket, options.CreateBucketOptions,
                      'Create a new S3 bucket',
                      [('name', 'Name of the bucket to create', True)]),
    'delete-bucket': (handlers.delete_bucket, options.DeleteBucketOptions,
                      'Delete an S3 bucket',
                      [('name', 'Name of the bucket to delete', True)]),
    'list-files': (handlers.list_files, options.ListFilesOptions,
                   'List files in an S3 bucket',
                   [('bucket', 'Name of the bucket', True),
                    ('prefix', 'Prefix to filter objects', False)]),
    'upload-file': (handlers.upload_file, options.UploadFileOptions,
                    'Upload a file to S3',
                    [('bucket', 'Name of the bucket', True),
                     ('file', 'Path to the file to upload', True),
                     ('key', 'S3 object key (defaults to filename)', False)]),
    'download-file': (handlers.download_file, options.DownloadFileOptions,
                      'Download a file from S3',
                      [('bucket', 'Name of the bucket', True),
                       ('key', 'S3 object key to download', True),
                       ('output', 'Output file path (defaults to the key name)', False)]),
    'delete-file': (handlers.delete_file, options.DeleteFileOptions,
                    'Delete a file from S3',
                    [('bucket', 'Name of the bucket', True),
                     ('key', 'S3 object key to delete', True)]),
}


def _add_global_options(parser, suppress=False):
    """
    Global options are accepted before or after the command name. On the
    sub-command parsers the defaults are suppressed so they never overwrite a
    value given before the command.
    """
    def default(value):
        return argparse.SUPPRESS if suppress else value
    parser.add_argument('--region', default=default(DEFAULT_REGION),
                        help=f'AWS region to use (default {DEFAULT_REGION})')
    parser.add_argument('--env-file', dest='env_file', default=default(None),
                        help=f'Path to a .env file whose values override the environment '
                             f'({DEFAULT_ENV_FILE} is always read, without overriding)')
    parser.add_argument('--verbose', action='store_true', default=default(False),
                        help='Show debug logging')
    parser.add_argument('--no-color', dest='no_color', action='store_true', default=default(False),
                        help='Do not colour the output')


def build_parser(prog='s3cli'):
    parser = CliArgumentParser(prog=prog,
                               usage=f'{prog} <command> [options]',
                               description='Manage S3 buckets and objects from the command line.')
    _add_global_options(parser)
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', metavar='<command>',
                                       title='commands', prog=prog)
    subparsers.required = True
    for name, (handler, record, description, opts) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=description, description=description)
        for option, text, required in opts:
            sub.add_argument(f'--{option}', dest=option, required=required, help=text)
        _add_global_options(sub, suppress=True)
    return parser


def dispatch(argv, environ=None, client_factory=None):
    """
    Run one command line (without the program name) and return its Result.
    Usage problems are reported before settings are resolved or any client
    is built.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        return Failure(FailureKind.USAGE, f'Error: {e}', usage=e.usage)

    log = configure(args.verbose)
    if args.no_color:
        ansi.allow_style = ansi.AllowStyle.NEVER

    handler, record, _, _ = COMMANDS[args.command]
    opts = record.from_namespace(args)
    log.debug(f'[dispatch] {args.command} with {opts}')

    settings = load_settings(region=args.region, env_file=args.env_file, environ=environ)
    return handler(opts, settings, client_factory)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    return report(dispatch(argv), sys.stdout, sys.stderr)


if __name__ == '__main__':
    sys.exit(main())
