"""
SDK configuration: API key, target chain, HTTP timeout, and poll budgets.

- The chain is an explicit value handed to the gateway at construction time.
  Each chain maps to one fixed base URL. Mainnet is modelled but rejected.
- Supports overrides via environment variables (MINATOKENS_*).
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ConfigError
from .polling import PollBudget
from .version import user_agent as _default_user_agent

# Job queue latency vs ledger confirmation latency
JOB_POLL_INTERVAL_S = 10.0
JOB_TIMEOUT_S = 10 * 60.0
TX_POLL_INTERVAL_S = 30.0
TX_TIMEOUT_S = 5 * 60 * 60.0
MAX_POLL_ERRORS = 100


class Chain(str, Enum):
    MAINNET = "mainnet"
    DEVNET = "devnet"
    ZEKO = "zeko"
    LOCAL = "local"

    @property
    def base_url(self) -> str:
        return _BASE_URLS[self]

    @property
    def enabled(self) -> bool:
        return self is not Chain.MAINNET

    @classmethod
    def parse(cls, value: Any) -> "Chain":
        if isinstance(value, Chain):
            return value
        s = str(value or "").strip().lower()
        try:
            return cls(s)
        except ValueError:
            names = ", ".join(c.value for c in cls)
            raise ConfigError(f"unknown chain {value!r}; expected one of: {names}") from None


_BASE_URLS: Dict[Chain, str] = {
    Chain.MAINNET: "https://minatokens.com/api/v1",
    Chain.DEVNET: "https://minatokens.com/api/v1",
    Chain.ZEKO: "https://zekotokens.com/api/v1",
    Chain.LOCAL: "http://localhost:3000/api/v1",
}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class SDKConfig:
    api_key: str
    chain: Chain = Chain.DEVNET
    # HTTP
    request_timeout: float = 30.0
    # Proving job polling
    job_poll_interval: float = JOB_POLL_INTERVAL_S
    job_timeout: float = JOB_TIMEOUT_S
    job_max_errors: int = MAX_POLL_ERRORS
    # Inclusion polling
    tx_poll_interval: float = TX_POLL_INTERVAL_S
    tx_timeout: float = TX_TIMEOUT_S
    tx_max_errors: int = MAX_POLL_ERRORS
    user_agent: str = field(default_factory=_default_user_agent)

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigError("api_key is required")
        chain = Chain.parse(self.chain)
        if not chain.enabled:
            raise ConfigError(f"{chain.value} is not supported yet")
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "chain", chain)
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")
        # Budgets validate their own fields
        self.job_budget()
        self.tx_budget()

    @property
    def base_url(self) -> str:
        return self.chain.base_url

    @classmethod
    def from_env(cls, prefix: str = "MINATOKENS_", **overrides: Any) -> "SDKConfig":
        """
        Create config from environment variables:

        MINATOKENS_API_KEY           (required unless passed as override)
        MINATOKENS_CHAIN             devnet | zeko | local
        MINATOKENS_TIMEOUT           HTTP timeout, seconds
        MINATOKENS_JOB_POLL_INTERVAL seconds between job polls
        MINATOKENS_JOB_TIMEOUT       max seconds to wait for a job
        MINATOKENS_TX_POLL_INTERVAL  seconds between tx-status polls
        MINATOKENS_TX_TIMEOUT        max seconds to wait for inclusion
        MINATOKENS_MAX_ERRORS        transport error budget for both loops
        """
        max_errors = int(_env_float(f"{prefix}MAX_ERRORS", MAX_POLL_ERRORS))
        data: Dict[str, Any] = {
            "api_key": _env(f"{prefix}API_KEY", ""),
            "chain": _env(f"{prefix}CHAIN", Chain.DEVNET.value),
            "request_timeout": _env_float(f"{prefix}TIMEOUT", 30.0),
            "job_poll_interval": _env_float(f"{prefix}JOB_POLL_INTERVAL", JOB_POLL_INTERVAL_S),
            "job_timeout": _env_float(f"{prefix}JOB_TIMEOUT", JOB_TIMEOUT_S),
            "job_max_errors": max_errors,
            "tx_poll_interval": _env_float(f"{prefix}TX_POLL_INTERVAL", TX_POLL_INTERVAL_S),
            "tx_timeout": _env_float(f"{prefix}TX_TIMEOUT", TX_TIMEOUT_S),
            "tx_max_errors": max_errors,
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)

    def with_overrides(self, **overrides: Any) -> "SDKConfig":
        """Return a new validated config. Unknown keys are ignored."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        return SDKConfig(**data)

    def job_budget(self) -> PollBudget:
        return PollBudget(
            interval_s=self.job_poll_interval,
            timeout_s=self.job_timeout,
            max_errors=self.job_max_errors,
        )

    def tx_budget(self) -> PollBudget:
        return PollBudget(
            interval_s=self.tx_poll_interval,
            timeout_s=self.tx_timeout,
            max_errors=self.tx_max_errors,
        )

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
            "x-api-key": self.api_key,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "Chain",
    "SDKConfig",
    "JOB_POLL_INTERVAL_S",
    "JOB_TIMEOUT_S",
    "TX_POLL_INTERVAL_S",
    "TX_TIMEOUT_S",
    "MAX_POLL_ERRORS",
]
