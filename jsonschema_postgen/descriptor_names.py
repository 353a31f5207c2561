"""
Helpers to check that every message in a compiled buf image has a generated
schema file
"""

# Standard
from typing import Iterable, List
import os

# Third Party
from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

# First Party
import alog

# Local
from .errors import MalformedInputError, SchemaReadError
from .naming import kebab_schema_filename

log = alog.use_channel("DESC")

## Globals #####################################################################

# Well-known types ship with protobuf itself and never get a generated schema
WELL_KNOWN_TYPES_PREFIX = "google/protobuf/"


## Interface ###################################################################


def load_image(path: str) -> descriptor_pb2.FileDescriptorSet:
    """Load a serialized FileDescriptorSet as written by `buf build -o`"""
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as err:
        raise SchemaReadError(path, err) from err
    try:
        fds = descriptor_pb2.FileDescriptorSet.FromString(raw)
    except DecodeError as err:
        raise MalformedInputError(path, str(err)) from err
    log.debug2("Loaded %d files from image %s", len(fds.file), path)
    return fds


def iter_message_full_names(fds: descriptor_pb2.FileDescriptorSet) -> Iterable[str]:
    """Yield the fully qualified name of every top-level message. Files of
    the protobuf well-known types are skipped since they are always imports.
    """
    for fd_proto in fds.file:
        if fd_proto.name.startswith(WELL_KNOWN_TYPES_PREFIX):
            log.debug3("Skipping well-known types file %s", fd_proto.name)
            continue
        for message in fd_proto.message_type:
            if fd_proto.package:
                yield ".".join([fd_proto.package, message.name])
            else:
                yield message.name


def expected_schema_filenames(fds: descriptor_pb2.FileDescriptorSet) -> List[str]:
    """Get the final schema file names that the messages in fds map to"""
    return sorted(
        {
            kebab_schema_filename(f"{full_name}.json")
            for full_name in iter_message_full_names(fds)
        }
    )


def find_missing_schemas(
    fds: descriptor_pb2.FileDescriptorSet, directory: str
) -> List[str]:
    """Get the expected schema file names that do not exist in directory"""
    existing = set(os.listdir(directory)) if os.path.isdir(directory) else set()
    missing = [
        name for name in expected_schema_filenames(fds) if name not in existing
    ]
    for name in missing:
        log.warning("No schema generated for %s", name)
    return missing
