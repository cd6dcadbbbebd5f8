"""S3 → CloudSearch document indexer."""

__version__ = "0.1.0"
