"""
Source Errors

SourceUnavailableError never leaves the resolver: it marks one failed
attempt in the fallback chain. InvalidPasteError is raised to the caller.
"""


class SourceUnavailableError(Exception):
    """A resolver attempt could not produce records."""


class InvalidPasteError(ValueError):
    """Pasted text is not JSON, or does not hold a list of shipments."""
