"""
One immutable option record per command. The parser guarantees the required
fields are present, so a record which exists is a valid request.
"""
from dataclasses import dataclass, fields
from pathlib import PurePosixPath, Path
from typing import Optional

from s3cli.config import DEFAULT_REGION


@dataclass(frozen=True)
class CommandOptions:
    region: str = DEFAULT_REGION

    @classmethod
    def from_namespace(cls, namespace):
        """ Build the record from an argparse namespace, ignoring anything it does not declare """
        values = vars(namespace)
        return cls(**{f.name: values[f.name] for f in fields(cls) if f.name in values})


@dataclass(frozen=True)
class ListBucketsOptions(CommandOptions):
    pass


@dataclass(frozen=True)
class GetBucketRegionOptions(CommandOptions):
    name: str = None


@dataclass(frozen=True)
class CreateBucketOptions(CommandOptions):
    name: str = None


@dataclass(frozen=True)
class DeleteBucketOptions(CommandOptions):
    name: str = None


@dataclass(frozen=True)
class ListFilesOptions(CommandOptions):
    bucket: str = None
    prefix: Optional[str] = None


@dataclass(frozen=True)
class UploadFileOptions(CommandOptions):
    bucket: str = None
    file: str = None
    key: Optional[str] = None

    @property
    def object_key(self):
        """ The explicit key, or the base name of the local file """
        return self.key or Path(self.file).name


@dataclass(frozen=True)
class DownloadFileOptions(CommandOptions):
    bucket: str = None
    key: str = None
    output: Optional[str] = None

    @property
    def output_path(self):
        """ The explicit output path, or the base name of the object key """
        return self.output or PurePosixPath(self.key).name


@dataclass(frozen=True)
class DeleteFileOptions(CommandOptions):
    bucket: str = None
    key: str = None
