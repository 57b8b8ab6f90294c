"""
minatokens_sdk.cli.main
=======================

`minatokens`: query the MinaTokens service and wait on jobs/transactions
from a shell.

Examples
--------
    $ minatokens --api-key $KEY info B62q...
    $ minatokens tx-status 5Ju...
    $ minatokens wait-job zkCW... --interval 5
    $ minatokens --chain zeko wait-tx 5Ju... --max-wait 3600

Configuration
-------------
- API key : `--api-key` or env `MINATOKENS_API_KEY` (required)
- Chain   : `--chain` or env `MINATOKENS_CHAIN` (devnet | zeko | local)
- Timeout : `--timeout` or env `MINATOKENS_TIMEOUT` seconds per HTTP call

Exit codes: 0 success, 1 error or failed job/transaction, 2 poll budget
exhausted (state unknown, query again later).
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import typer
from pydantic import BaseModel

from ..api.client import MinaTokensAPI
from ..config import SDKConfig
from ..errors import MinaTokensError, PollExhaustedError
from ..jobs import JobState
from ..polling import PollBudget
from ..version import __version__ as SDK_VERSION

app = typer.Typer(
    name="minatokens",
    help="MinaTokens SDK CLI: token/NFT info, proving jobs and transaction status.",
    no_args_is_help=True,
    add_completion=False,
)

_log = logging.getLogger("minatokens.cli")

EXIT_FAILED = 1
EXIT_EXHAUSTED = 2


@dataclass
class Ctx:
    api_key: Optional[str]
    chain: Optional[str]
    timeout: Optional[float]


def _print_json(obj: Any) -> None:
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(by_alias=True, exclude_none=True, mode="json")
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(message: str, code: int = EXIT_FAILED) -> None:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code)


@app.callback()
def _root(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(None, "--api-key", help="MinaTokens API key.", envvar="MINATOKENS_API_KEY"),
    chain: Optional[str] = typer.Option(None, "--chain", help="devnet | zeko | local", envvar="MINATOKENS_CHAIN"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds.", envvar="MINATOKENS_TIMEOUT"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """Set effective configuration for this CLI process."""
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = Ctx(api_key=api_key, chain=chain, timeout=timeout)


def _config(ctx: typer.Context) -> SDKConfig:
    c: Ctx = ctx.obj
    return SDKConfig.from_env(api_key=c.api_key, chain=c.chain, request_timeout=c.timeout)


def _run(ctx: typer.Context, fn: Callable[[MinaTokensAPI], Awaitable[Any]]) -> Any:
    try:
        cfg = _config(ctx)
    except MinaTokensError as e:
        _fail(str(e))
    _log.debug("Using chain %s at %s", cfg.chain.value, cfg.base_url)

    async def _go() -> Any:
        async with MinaTokensAPI(cfg) as api:
            return await fn(api)

    try:
        return asyncio.run(_go())
    except PollExhaustedError as e:
        _fail(str(e), EXIT_EXHAUSTED)
    except MinaTokensError as e:
        _fail(str(e))


def _budget(base: PollBudget, interval: Optional[float], max_wait: Optional[float], max_errors: Optional[int]) -> PollBudget:
    return PollBudget(
        interval_s=base.interval_s if interval is None else interval,
        timeout_s=base.timeout_s if max_wait is None else max_wait,
        max_errors=base.max_errors if max_errors is None else max_errors,
    )


# --- Commands ----------------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"minatokens {SDK_VERSION}")


@app.command("info")
def info(ctx: typer.Context, token_address: str = typer.Argument(..., help="Token contract address.")) -> None:
    """Fetch token state."""
    _print_json(_run(ctx, lambda api: api.get_token_info(token_address)))


@app.command("balance")
def balance(
    ctx: typer.Context,
    token_address: str = typer.Argument(..., help="Token contract address."),
    address: str = typer.Argument(..., help="Holder address."),
) -> None:
    """Fetch a holder's token balance."""
    _print_json(_run(ctx, lambda api: api.get_balance(address, token_address=token_address)))


@app.command("tx-status")
def tx_status(ctx: typer.Context, tx_hash: str = typer.Argument(..., help="Transaction hash.")) -> None:
    """Fetch inclusion status of a transaction once."""
    _print_json(_run(ctx, lambda api: api.tx_status(tx_hash)))


@app.command("job")
def job(ctx: typer.Context, job_id: str = typer.Argument(..., help="Proving job id.")) -> None:
    """Fetch the current result of a proving job once."""
    _print_json(_run(ctx, lambda api: api.get_proof(job_id)))


@app.command("faucet")
def faucet(ctx: typer.Context, address: str = typer.Argument(..., help="Address to fund.")) -> None:
    """Request test funds for an address."""
    _print_json(_run(ctx, lambda api: api.faucet(address)))


@app.command("wait-job")
def wait_job(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Proving job id."),
    interval: Optional[float] = typer.Option(None, "--interval", help="Seconds between polls."),
    max_wait: Optional[float] = typer.Option(None, "--max-wait", help="Give up after this many seconds."),
    max_errors: Optional[int] = typer.Option(None, "--max-errors", help="Give up after this many transport errors."),
) -> None:
    """Wait for a proving job and print its transaction hashes."""

    async def _wait(api: MinaTokensAPI):
        return await api.jobs.wait(job_id, budget=_budget(api.jobs.budget, interval, max_wait, max_errors))

    outcome = _run(ctx, _wait)
    _print_json(
        {
            "jobId": outcome.job_id,
            "state": outcome.state.value,
            "hashes": outcome.hashes,
            "reason": outcome.reason,
        }
    )
    if outcome.state is JobState.FAILED:
        raise typer.Exit(EXIT_FAILED)
    if outcome.state is JobState.EXHAUSTED:
        raise typer.Exit(EXIT_EXHAUSTED)


@app.command("wait-tx")
def wait_tx(
    ctx: typer.Context,
    tx_hash: str = typer.Argument(..., help="Transaction hash."),
    interval: Optional[float] = typer.Option(None, "--interval", help="Seconds between polls."),
    max_wait: Optional[float] = typer.Option(None, "--max-wait", help="Give up after this many seconds."),
    max_errors: Optional[int] = typer.Option(None, "--max-errors", help="Give up after this many transport errors."),
) -> None:
    """Wait until a transaction is included in a block."""

    async def _wait(api: MinaTokensAPI):
        return await api.watcher.wait(tx_hash, budget=_budget(api.watcher.budget, interval, max_wait, max_errors))

    result = _run(ctx, _wait)
    _print_json({"hash": result.hash, "status": result.state.value, "details": result.details})


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        # click returns the Exit code instead of raising when not standalone
        rv = app(prog_name="minatokens", standalone_mode=False, args=argv)
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
