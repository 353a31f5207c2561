"""
File naming conventions for the generated schema files. protoc-gen-jsonschema
emits files named after the fully qualified message, e.g.

    skiff.registry.v1.PluginManifest.jsonschema.strict.bundle.json

which end up as

    skiff.registry.v1.plugin-manifest.json
"""

# Standard
from typing import Dict, List
import os
import re

# First Party
import alog

# Local
from .errors import SchemaReadError, SchemaWriteError

log = alog.use_channel("NAME")

## Globals #####################################################################

DEFAULT_BUNDLE_MARKER = ".jsonschema.strict.bundle"

FLATTENED_FILE_MODE = 0o644

# Number of leading dot-separated fields that form the package prefix
PACKAGE_PREFIX_FIELDS = 3


## Interface ###################################################################


def to_kebab_case(name: str) -> str:
    """Convert an UpperCamelCase name to kebab-case. Every upper case letter
    starts a new word, so acronyms are split letter by letter.
    """
    if not name:
        return name
    return re.sub("([A-Z])", r"-\1", name).lstrip("-").lower()


def strip_bundle_marker(path: str, marker: str = DEFAULT_BUNDLE_MARKER) -> str:
    """Remove the bundle marker from a schema file path"""
    return path.replace(marker, "")


def kebab_schema_filename(filename: str) -> str:
    """Get the final name for a generated schema file: the package prefix is
    kept, the message name is kebab-cased and everything after it is dropped.
    Names too short to hold a message name are returned unchanged.
    """
    fields = filename.split(".")
    if len(fields) <= PACKAGE_PREFIX_FIELDS + 1:
        return filename
    prefix = ".".join(fields[:PACKAGE_PREFIX_FIELDS])
    message_name = fields[PACKAGE_PREFIX_FIELDS]
    return f"{prefix}.{to_kebab_case(message_name)}.json"


def rename_schema_files(directory: str) -> Dict[str, str]:
    """Rename every *.json file directly inside directory to its kebab-case
    schema name

    Returns:
        renames:  Dict[str, str]
            Mapping from old file name to new file name
    """
    renames = {}
    if not os.path.isdir(directory):
        log.warning("Schema directory %s does not exist, nothing to rename", directory)
        return renames

    try:
        filenames = sorted(os.listdir(directory))
    except OSError as err:
        raise SchemaReadError(directory, err) from err

    for filename in filenames:
        old_path = os.path.join(directory, filename)
        if not filename.endswith(".json") or not os.path.isfile(old_path):
            continue
        new_name = kebab_schema_filename(filename)
        if new_name == filename:
            continue
        log.info("Renaming: %s -> %s", filename, new_name)
        new_path = os.path.join(directory, new_name)
        try:
            os.replace(old_path, new_path)
        except OSError as err:
            raise SchemaWriteError(new_path, err) from err
        renames[filename] = new_name
    return renames


def write_flattened_updates(
    directory: str,
    updates: Dict[str, bytes],
    marker: str = DEFAULT_BUNDLE_MARKER,
) -> List[str]:
    """Store flattened schemas under their final names. The new content is
    written to the source path with the bundle marker stripped, and only then
    is the bundled source removed.

    Args:
        directory:  str
            The schema directory the update paths are relative to
        updates:  Dict[str, bytes]
            Forward-slash relative path -> flattened content
        marker:  str
            The bundle marker substring to remove from file names

    Returns:
        failed:  List[str]
            The relative paths that could not be written (after renaming) or
            removed (bundled sources)
    """
    failed = []
    for rel_path, content in updates.items():
        target_rel = strip_bundle_marker(rel_path, marker)
        target = os.path.join(directory, *target_rel.split("/"))
        try:
            with open(target, "wb") as handle:
                handle.write(content)
            os.chmod(target, FLATTENED_FILE_MODE)
        except OSError as err:
            log.error("Failed to write file %s: %s", target_rel, err)
            failed.append(target_rel)
            continue
        log.debug2("Wrote %s", target_rel)

        if target_rel == rel_path:
            continue
        source = os.path.join(directory, *rel_path.split("/"))
        try:
            os.remove(source)
        except FileNotFoundError:
            log.debug("Source %s already removed", source)
        except OSError as err:
            log.error("Failed to remove bundled file %s: %s", rel_path, err)
            failed.append(rel_path)
    return failed
