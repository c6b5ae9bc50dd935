"""Failure signals raised by the exporters.

Only environment-level failures surface as exceptions.  Structural problems in
section markup are absorbed by the builders and reported as warnings.
"""


class ExportError(RuntimeError):
    """Base class for a failed export call (no file was produced)."""


class RasterizationError(ExportError):
    """The render surface could not be painted, captured or decoded."""


class PackagingError(ExportError):
    """The DOCX or PDF container could not be assembled or serialised."""


__all__ = ["ExportError", "PackagingError", "RasterizationError"]
