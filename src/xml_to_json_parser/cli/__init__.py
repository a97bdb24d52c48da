"""Command-line interface module for the XML to JSON parser.

This module provides the ``xml-to-json`` tool that reads a document from disk
and prints the converted JSON value.
"""

from .main import main

__all__ = ["main"]
