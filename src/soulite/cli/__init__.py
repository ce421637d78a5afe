"""
Soulite Command-Line Interface
==============================

This package provides the command-line tool for the Soulite front end:

- **soulc**: parse a .soul file and print its top-level units

The tool is a Click application with help text and consistent exit codes
(see soulite.cli.errors).
"""

__all__ = ["soulc"]
