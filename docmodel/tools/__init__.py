"""Command line tools for docmodel."""
