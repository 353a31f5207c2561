"""
This module implements the recursive inlining of local $ref pointers. Every
object carrying a $ref is replaced by a deep copy of its (fully inlined) target
with any sibling keys merged on top.
"""

# Standard
from typing import Any, Dict, List, Optional
import copy

# First Party
import alog

# Local
from .errors import CyclicReferenceError, ReferenceTypeError
from .pointer import resolve_pointer

log = alog.use_channel("INLN")

## Globals #####################################################################

REF_KEY = "$ref"
DEFS_KEY = "$defs"


## Interface ###################################################################


def inline_refs(node: Any, root: Any, stack: Optional[List[str]] = None) -> Any:
    """Produce a new tree with every local $ref in node inlined

    Args:
        node:  Any
            The (sub)tree to inline
        root:  Any
            The pristine document root that pointers are resolved against. This
            must still hold its $defs.
        stack:  Optional[List[str]]
            The pointers currently being followed. Used only to detect cycles.

    Returns:
        inlined:  Any
            A new tree with no $ref or $defs keys
    """
    stack = stack or []

    if isinstance(node, dict):
        if REF_KEY in node:
            return _inline_ref_object(node, root, stack)

        # Plain object: $defs is only needed while resolving
        return {
            key: inline_refs(child, root, stack)
            for key, child in node.items()
            if key != DEFS_KEY
        }

    if isinstance(node, list):
        return [inline_refs(child, root, stack) for child in node]

    return node


## Impl ########################################################################


def _inline_ref_object(node: Dict[str, Any], root: Any, stack: List[str]) -> Any:
    """Replace a $ref-bearing object with its resolved target"""
    pointer = node[REF_KEY]
    if not isinstance(pointer, str):
        raise ReferenceTypeError(pointer)
    if pointer in stack:
        raise CyclicReferenceError(stack + [pointer])

    log.debug3("Following %s (depth %d)", pointer, len(stack))
    target = copy.deepcopy(resolve_pointer(root, pointer))
    resolved_target = inline_refs(target, root, stack + [pointer])

    # Siblings are not part of the followed reference, so the stack is unchanged
    siblings = {
        key: inline_refs(child, root, stack)
        for key, child in node.items()
        if key not in (REF_KEY, DEFS_KEY)
    }

    if isinstance(resolved_target, dict):
        merged = {
            key: val for key, val in resolved_target.items() if key != DEFS_KEY
        }
        merged.update(siblings)
        return merged

    if siblings:
        log.warning(
            "Dropping sibling keys %s of %s: target is a %s, not an object",
            sorted(siblings),
            pointer,
            type(resolved_target).__name__,
        )
    return resolved_target
