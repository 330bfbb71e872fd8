"""Command line interface for natdoc."""
