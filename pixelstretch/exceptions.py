"""Exception classes for the stretch pipeline."""


class StretchError(Exception):
    """Base exception for pixelstretch errors."""

    pass


class ConfigurationError(StretchError, ValueError):
    """Raised when a settings value is outside its enumerated set or has the wrong type."""

    pass


class ImageSizeError(StretchError, ValueError):
    """Raised for zero-sized, oversized or malformed image buffers."""

    pass
