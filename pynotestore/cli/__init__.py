"""Command line interface for pynotestore."""
