"""QR ticket issuing, validation and redemption service."""

__version__ = "0.1.0"
