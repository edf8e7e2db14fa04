"""Device Partitioner - partition hierarchical CSV points into devices."""

from .version import load_version

__version__ = load_version()

__all__ = ["__version__"]
