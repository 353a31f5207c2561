"""
Error types raised while post-processing generated schemas. Every error is
terminal for the batch that raised it.
"""

# Standard
from typing import List, Optional


class PostgenError(Exception):
    """Base class for all errors raised by jsonschema_postgen"""


## Document errors #############################################################


class MalformedInputError(PostgenError, ValueError):
    """A schema file could not be parsed as JSON"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"parse {path}: {reason}")
        self.path = path


class UnsupportedReferenceFormError(PostgenError, ValueError):
    """A $ref is not a local JSON pointer of the form #/..."""

    def __init__(self, pointer: str):
        super().__init__(f"only local refs supported, got: {pointer!r}")
        self.pointer = pointer


class UnresolvedReferenceError(PostgenError, ValueError):
    """A local JSON pointer does not resolve inside its document"""

    def __init__(self, pointer: str, segment: str, message: Optional[str] = None):
        super().__init__(
            message or f"unresolved $ref {pointer!r}: missing key {segment!r}"
        )
        self.pointer = pointer
        self.segment = segment


class ReferenceTypeError(PostgenError, TypeError):
    """A $ref value is not a string"""

    def __init__(self, value):
        super().__init__(f"$ref must be a string, got {type(value).__name__}")
        self.value = value


class CyclicReferenceError(PostgenError, ValueError):
    """A pointer was revisited while it was still being resolved"""

    def __init__(self, chain: List[str]):
        super().__init__(f"cyclic $ref detected: {' -> '.join(chain)}")
        self.chain = list(chain)


class SchemaInlineError(PostgenError, ValueError):
    """Wraps any inlining failure with the path of the offending file"""

    def __init__(self, path: str, reason: Exception):
        super().__init__(f"inline refs in {path}: {reason}")
        self.path = path


## I/O errors ##################################################################


class SchemaIOError(PostgenError, OSError):
    """Base for failures reading or writing schema files"""

    verb = "access"

    def __init__(self, path: str, reason: Exception):
        super().__init__(f"{self.verb} {path}: {reason}")
        self.path = path


class SchemaReadError(SchemaIOError):
    verb = "read"


class SchemaWriteError(SchemaIOError):
    verb = "write"


## Toolchain errors ############################################################


class ToolchainError(PostgenError, RuntimeError):
    """An external code generation command exited unsuccessfully"""

    def __init__(self, command: List[str], returncode: int, stderr: str = ""):
        message = f"command {' '.join(command)!r} failed with exit code {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
