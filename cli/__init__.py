"""Subcommand modules for the pxe command line."""
