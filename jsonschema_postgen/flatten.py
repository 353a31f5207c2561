"""
This module implements flattening of bundled JSON Schema documents: every
local $ref is inlined against the document's own $defs and the bookkeeping
keywords ($id, $defs, nested $schema) are removed.
"""

# Standard
from typing import Any, Dict
import json
import math

# First Party
import alog

# Local
from .errors import (
    MalformedInputError,
    PostgenError,
    SchemaInlineError,
    SchemaReadError,
    SchemaWriteError,
)
from .filesystem import DEFAULT_FILE_MODE, SchemaFS, WritableSchemaFS
from .inline_refs import inline_refs
from .strip_keys import strip_keys

log = alog.use_channel("FLTN")

## Globals #####################################################################

SCHEMA_FILE_SUFFIX = ".json"

SERIALIZED_INDENT = 2


## Interface ###################################################################


def flatten_schema(document: Any) -> Any:
    """Inline all local references in a parsed document and strip the
    bookkeeping keywords, keeping the top-level $schema
    """
    return strip_keys(inline_refs(document, document), keep_top_level_schema=True)


def serialize_schema(document: Any) -> bytes:
    """Deterministic serialization: sorted keys, 2-space indent and a single
    trailing newline
    """
    return (
        json.dumps(
            document,
            indent=SERIALIZED_INDENT,
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
        )
        + "\n"
    ).encode("utf-8")


def flatten_schema_bytes(raw: bytes, path: str = "<bytes>") -> bytes:
    """Parse, flatten and re-serialize the raw content of one schema file

    Args:
        raw:  bytes
            The file content
        path:  str
            The path used to give errors some context

    Returns:
        flattened:  bytes
            The serialized flattened document
    """
    try:
        document = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_parse_finite_float
        )
    except ValueError as err:
        raise MalformedInputError(path, str(err)) from err

    try:
        flattened = flatten_schema(document)
    except PostgenError as err:
        raise SchemaInlineError(path, err) from err

    return serialize_schema(flattened)


def flatten_schemas_in_fs(fs: SchemaFS) -> Dict[str, bytes]:
    """Flatten every *.json file in the given filesystem

    Files are handled one at a time in walk order. If fs is a WritableSchemaFS,
    each flattened file is also written back in place with its original
    permission bits.

    Args:
        fs:  SchemaFS
            The filesystem holding the bundled schemas

    Returns:
        updates:  Dict[str, bytes]
            Mapping from forward-slash relative path to the new file content.
            Any failure aborts the whole walk, so no partial mapping is ever
            returned.
    """
    writable = isinstance(fs, WritableSchemaFS)
    log.debug("Flattening schemas in %s (write back: %s)", fs, writable)

    updates = {}
    for path in fs.walk():
        if not path.lower().endswith(SCHEMA_FILE_SUFFIX):
            log.debug4("Skipping non-schema file %s", path)
            continue

        try:
            raw = fs.read_bytes(path)
        except OSError as err:
            raise SchemaReadError(path, err) from err

        out = flatten_schema_bytes(raw, path)
        key = path.replace("\\", "/")
        updates[key] = out
        log.debug2("Flattened %s (%d -> %d bytes)", key, len(raw), len(out))

        if writable:
            _write_back(fs, path, out)

    log.info("Flattened %d schema files", len(updates))
    return updates


## Impl ########################################################################


def _write_back(fs: WritableSchemaFS, path: str, data: bytes):
    """Write the flattened content back, preserving the original permissions"""
    try:
        mode = fs.stat_mode(path)
    except OSError as err:
        log.debug("Could not stat %s, using default mode: %s", path, err)
        mode = DEFAULT_FILE_MODE
    try:
        fs.write_bytes(path, data, mode)
    except OSError as err:
        raise SchemaWriteError(path, err) from err


def _reject_constant(name: str):
    """NaN and +/-Infinity are accepted by the json module but are not JSON"""
    raise ValueError(f"invalid JSON constant {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number {text} is out of range")
    return value
