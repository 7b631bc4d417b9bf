"""depwatch core: compare declared asset dependencies between two revisions."""

__version__ = "0.1.0"
