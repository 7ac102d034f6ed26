"""Console runtime: VT output, line reading, PATH resolution, file filters."""

__version__ = "0.1.0"
