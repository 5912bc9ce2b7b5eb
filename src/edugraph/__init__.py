"""edugraph - interactive concept graph for lecture videos."""

__version__ = "0.1.0"
