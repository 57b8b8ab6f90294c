"""
Command-line interface for the MinaTokens SDK.

Entry point: ``minatokens`` (see :mod:`minatokens_sdk.cli.main`).
"""

from .main import app, main

__all__ = ["app", "main"]
