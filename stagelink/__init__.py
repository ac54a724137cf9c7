"""Link local workspace packages into a generated staging manifest."""

from .errors import LinkerError, ManifestIOError, ParseError, SchemaError

__all__ = ["LinkerError", "ManifestIOError", "ParseError", "SchemaError"]
