"""
Conversion Errors
=================

Exception hierarchy for the conversion service.

Every failure is classified as either a client input error (the caller can
fix it by changing the request) or a server fault (the caller cannot).
The HTTP layer maps each class to its status code.

Hierarchy:
    ConversionError
        ClientInputError (400)
            EmptyInputError
            SvgParseError
            InvalidGeometry
            DensityOverflowError
        ServerFault (500)
            EncodingFailure
                RasterizationError
            CanvasAllocationError
            BackgroundRemovalError
"""


class ConversionError(Exception):
    """Base class for all classified conversion failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        """Message that is safe to return to the caller."""
        return self.message


class ClientInputError(ConversionError):
    """Request was rejected because of its content."""

    status_code = 400


class EmptyInputError(ClientInputError):
    """Request body was empty."""

    def __init__(self, message: str = "Request body cannot be empty") -> None:
        super().__init__(message)


class SvgParseError(ClientInputError):
    """SVG data could not be parsed into a document."""
    pass


class InvalidGeometry(ClientInputError):
    """Scaled document would produce an image with zero width or height."""
    pass


class DensityOverflowError(ClientInputError):
    """Requested DPI does not fit the PNG pixels-per-unit field."""
    pass


class ServerFault(ConversionError):
    """
    Failure the caller cannot correct by changing the request.

    The detailed message is kept for logs; callers only see a generic one.
    """

    status_code = 500
    generic_message: str = "Internal server error"

    @property
    def public_message(self) -> str:
        return self.generic_message


class EncodingFailure(ServerFault):
    """PNG header, chunk or image data could not be written."""

    generic_message = "Failed to encode PNG"


class RasterizationError(EncodingFailure):
    """Rasterizer failed while drawing the document."""

    generic_message = "Failed to render SVG"


class CanvasAllocationError(ServerFault):
    """Pixel canvas could not be allocated."""

    generic_message = "Failed to create pixmap"


class BackgroundRemovalError(ServerFault):
    """External image tool was unavailable or failed."""

    generic_message = "Failed to remove background"
