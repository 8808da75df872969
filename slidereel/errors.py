"""Exception hierarchy for slide extraction."""


class SlideReelError(Exception):
    """Base class for all slide extraction errors."""


class InvalidPackage(SlideReelError):
    """The input bytes could not be opened as a ZIP archive."""


class InvalidPackageStructure(SlideReelError):
    """The archive opened but is missing the presentation part."""


class PackagePartError(SlideReelError):
    """A part exists in the archive but its data cannot be read back."""


class PresentationParseError(SlideReelError):
    """User-facing error: the presentation could not be parsed at all."""

    DEFAULT_MESSAGE = (
        "Failed to parse PowerPoint file. Please ensure it's a valid .pptx file."
    )

    def __init__(self, message: str | None = None):
        super().__init__(message or self.DEFAULT_MESSAGE)


class RenderError(SlideReelError):
    """The synthetic renderer could not allocate its drawing surface."""


class ConversionError(SlideReelError):
    """A high-fidelity converter failed to produce slide images."""
