"""
minatokens_sdk.api
==================

- http   : ``ApiTransport``, the async one-call-per-endpoint HTTP gateway.
- client : ``MinaTokensAPI``, typed endpoint methods and wait helpers.
"""

from __future__ import annotations

from .client import MinaTokensAPI
from .http import ApiTransport

__all__ = ["ApiTransport", "MinaTokensAPI"]
