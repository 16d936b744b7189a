"""Command line interface for draft-release."""
