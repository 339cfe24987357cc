"""
Fatal export errors.

Recoverable problems (missing references, missing or oversized images,
decode timeouts) are logged and never raised. Only the conditions below
abort an export, and they always surface to the caller as an ExportError.
"""


class ExportError(RuntimeError):
    """Base class for failures that abort an export."""

    error_type = 'Publish Error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Structured form for the host (type + message)."""
        return {'type': self.error_type, 'message': self.message}


class SerializationError(ExportError):
    """Internal invariant broken while laying out the container."""

    error_type = 'Serialization Error'


class ManifestParseError(ExportError):
    """The manifest script is missing or malformed."""

    error_type = 'Manifest Parse Error'
