"""
MinaTokens SDK for Python.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import Chain, SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    ApiError,
    BatchIncompleteError,
    ConfigError,
    JobFailedError,
    MinaTokensError,
    PollExhaustedError,
    TransactionFailedError,
    UnknownStatusError,
)

# Gateway & client
from .api.http import ApiTransport  # noqa: F401
from .api.client import MinaTokensAPI  # noqa: F401

# Polling, jobs, inclusion
from .polling import PollBudget, PollOutcome, PollResult, Verdict, poll_until  # noqa: F401
from .jobs import JobOutcome, JobPoller, JobState  # noqa: F401
from .inclusion import InclusionResult, TransactionWatcher  # noqa: F401

# Lifecycle
from .lifecycle import LifecycleResult, Signer, TransactionLifecycle  # noqa: F401

# Wire types
from .types import (  # noqa: F401
    InclusionState,
    JobResult,
    JobStatus,
    TransactionPayload,
    TransactionStatus,
)

__all__ = [
    "__version__",
    # Core
    "Chain", "SDKConfig",
    "MinaTokensError", "ConfigError", "UnknownStatusError", "ApiError",
    "TransactionFailedError", "JobFailedError", "PollExhaustedError", "BatchIncompleteError",
    # Gateway
    "ApiTransport", "MinaTokensAPI",
    # Polling
    "PollBudget", "PollOutcome", "PollResult", "Verdict", "poll_until",
    "JobOutcome", "JobPoller", "JobState",
    "InclusionResult", "TransactionWatcher",
    # Lifecycle
    "LifecycleResult", "Signer", "TransactionLifecycle",
    # Types
    "InclusionState", "JobResult", "JobStatus", "TransactionPayload", "TransactionStatus",
]
