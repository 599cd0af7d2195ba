"""reporules — evaluate repository rules before committing or creating a branch."""

__version__ = "0.1.0"
