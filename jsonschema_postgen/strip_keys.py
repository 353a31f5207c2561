"""
Removal of schema bookkeeping keywords from an already inlined schema
"""

# Standard
from typing import Any

# First Party
import alog

log = alog.use_channel("STRP")

## Globals #####################################################################

SCHEMA_KEY = "$schema"

STRIPPED_KEYS = frozenset(["$id", "$defs", SCHEMA_KEY])


## Interface ###################################################################


def strip_keys(node: Any, keep_top_level_schema: bool = True) -> Any:
    """Remove every $id, $defs and $schema from the tree. When
    keep_top_level_schema is set, the document's own top-level $schema is put
    back afterwards.
    """
    top_schema = None
    if keep_top_level_schema and isinstance(node, dict):
        top_schema = node.get(SCHEMA_KEY)

    cleaned = _strip_keys_recursive(node)

    if top_schema is not None and isinstance(cleaned, dict):
        log.debug3("Restoring top-level %s", SCHEMA_KEY)
        cleaned[SCHEMA_KEY] = top_schema
    return cleaned


## Impl ########################################################################


def _strip_keys_recursive(node: Any) -> Any:
    if isinstance(node, dict):
        return {
            key: _strip_keys_recursive(child)
            for key, child in node.items()
            if key not in STRIPPED_KEYS
        }
    if isinstance(node, list):
        return [_strip_keys_recursive(child) for child in node]
    return node
