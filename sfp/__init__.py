"""sfp: publish built package artifacts to a package registry."""

__version__ = "0.1.0"
