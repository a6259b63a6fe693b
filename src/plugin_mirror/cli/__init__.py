"""Command-line interface subpackage."""
