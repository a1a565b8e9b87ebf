"""Command-line interface (``atlas``)."""
