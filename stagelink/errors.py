"""Exceptions raised while linking local packages into a manifest."""


class LinkerError(Exception):
    """Base class for all manifest linking failures."""


class ManifestIOError(LinkerError, OSError):
    """A manifest or package directory could not be read or written."""


class ParseError(LinkerError, ValueError):
    """A manifest file does not contain a JSON object."""


class SchemaError(ParseError):
    """A manifest is missing an expected field, or the field has the wrong shape."""
