"""Parsing helpers shared by the CLI."""
