"""Exception taxonomy for document conversion."""


class ConversionError(Exception):
    """Base class for failures that abort the conversion of one document."""


class ExtractionError(ConversionError):
    """Raised when the source document cannot be turned into HTML. Fatal; no partial output is written."""


class ImageWriteError(ConversionError):
    """Raised when an embedded image cannot be persisted. Renderers recover by emitting a placeholder."""


class UnsupportedConversionError(ConversionError):
    """Raised when no converter handles the requested input/output pair."""


class InvalidDocumentError(ConversionError):
    """Raised when the input path is missing, not a file, or of an unknown format."""
