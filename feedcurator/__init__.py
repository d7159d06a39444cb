"""feedcurator - RSS curation service for sports business news."""

__version__ = "0.1.0"
