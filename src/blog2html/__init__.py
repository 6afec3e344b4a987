"""blog2html - convert an XML chapter/page blog into a static HTML site."""

__version__ = "0.3.0"

__all__ = ["__version__"]
