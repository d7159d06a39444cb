"""Command-line interface for feedcurator."""
