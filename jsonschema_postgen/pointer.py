"""
Local JSON Pointer resolution for in-document $ref values

https://www.rfc-editor.org/rfc/rfc6901
"""

# Standard
from typing import Any

# First Party
import alog

# Local
from .errors import UnresolvedReferenceError, UnsupportedReferenceFormError

log = alog.use_channel("PNTR")

## Globals #####################################################################

LOCAL_POINTER_PREFIX = "#/"


## Interface ###################################################################


def escape_pointer_segment(segment: str) -> str:
    """Escape a single object key for use inside a JSON pointer"""
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_pointer_segment(segment: str) -> str:
    """Unescape a single JSON pointer segment. Order matters here: "~01" must
    become "~1", not "/".
    """
    return segment.replace("~1", "/").replace("~0", "~")


def resolve_pointer(root: Any, pointer: str) -> Any:
    """Resolve a local JSON pointer (e.g. "#/$defs/Name") against root

    Args:
        root:  Any
            The parsed document that the pointer is relative to
        pointer:  str
            The pointer string. Only the local "#/..." form is supported.

    Returns:
        target:  Any
            The referenced value inside root (not a copy)
    """
    if not pointer.startswith(LOCAL_POINTER_PREFIX):
        raise UnsupportedReferenceFormError(pointer)

    path = pointer[len(LOCAL_POINTER_PREFIX) :]
    if not path:
        return root

    current = root
    for raw_segment in path.split("/"):
        segment = unescape_pointer_segment(raw_segment)
        if not isinstance(current, dict):
            raise UnresolvedReferenceError(
                pointer,
                segment,
                f"pointer {pointer!r}: encountered non-object at {segment!r} "
                f"(got {type(current).__name__})",
            )
        if segment not in current:
            raise UnresolvedReferenceError(pointer, segment)
        current = current[segment]

    log.debug4("Resolved pointer %s", pointer)
    return current
