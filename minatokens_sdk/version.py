"""
Version helpers for the MinaTokens Python SDK.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    """Default User-Agent sent by the HTTP gateway."""
    return f"minatokens-sdk-python/{__version__}"


__all__ = ["__version__", "user_agent"]
