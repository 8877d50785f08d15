"""Pin remote download sources with cached integrity metadata."""

__version__ = "0.1.0"
