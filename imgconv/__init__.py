"""Client-side style image validation, conversion and upload."""

__version__ = "0.1.0"
