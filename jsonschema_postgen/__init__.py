"""
This library holds the post-generation steps for protobuf generated JSON
Schema files: inlining of local $ref pointers, removal of bookkeeping keywords
and the file naming conventions of the generated schemas.

References:
* https://json-schema.org/draft/2020-12/json-schema-core
* https://www.rfc-editor.org/rfc/rfc6901
* https://buf.build/docs/generate/overview

Example:

```
import jsonschema_postgen

flat = jsonschema_postgen.flatten_schema(
    {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$defs": {
            "Name": {"type": "string", "title": "Name"},
        },
        "properties": {
            # Sibling keys override the referenced schema
            "name": {"$ref": "#/$defs/Name", "title": "Full name"},
        },
    }
)

def flatten_dir(dirname: str):
    \"\"\"Flatten every *.json file in dirname in place\"\"\"
    jsonschema_postgen.flatten_schemas_in_fs(
        jsonschema_postgen.WritableDirFS(dirname)
    )
```
"""

# Local
from .errors import (
    CyclicReferenceError,
    MalformedInputError,
    PostgenError,
    ReferenceTypeError,
    SchemaInlineError,
    SchemaIOError,
    SchemaReadError,
    SchemaWriteError,
    ToolchainError,
    UnresolvedReferenceError,
    UnsupportedReferenceFormError,
)
from .filesystem import DirFS, MemoryFS, SchemaFS, WritableDirFS, WritableSchemaFS
from .flatten import (
    flatten_schema,
    flatten_schema_bytes,
    flatten_schemas_in_fs,
    serialize_schema,
)
from .inline_refs import inline_refs
from .pointer import resolve_pointer
from .strip_keys import strip_keys
