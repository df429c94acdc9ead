"""sharpdoc: generated XML documentation comments for C# sources."""

__version__ = "0.1.0"
