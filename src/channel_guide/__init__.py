"""Terminal channel guide: browse, filter and favorite TV channels."""

__version__ = "0.1.0"

__all__ = ["__version__"]
