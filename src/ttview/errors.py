class TTViewError(Exception):
    """Base class for errors reported per image by the CLI."""


class InvalidImage(TTViewError):
    """The file could not be decoded, or decoded to an empty image."""


class InvalidArgument(TTViewError, ValueError):
    """A width, height, gradient or preset value is not usable."""
