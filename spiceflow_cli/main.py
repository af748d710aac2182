"""
``spiceflow`` command line interface.

Commands:
    hash    Hash chain batches from a JSON file and print the intent digest
    status  Poll an intent step on the relayer until it is terminal
"""
import json
import logging
import pathlib
from typing import Any, List, Optional

import typer
from pydantic import ValidationError

from spiceflow_sdk.authorization import get_authorization_hash, hash_chain_batches
from spiceflow_sdk.config import TX_API_URL_ENV
from spiceflow_sdk.exceptions import ConfigError, EncodingError, StatusPollError
from spiceflow_sdk.models import StepStatus
from spiceflow_sdk.relayer import RelayerClient
from spiceflow_sdk.status import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT, poll_intent_step
from spiceflow_sdk.utils import to_hex

app = typer.Typer(help="SpiceFlow intent tooling", no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _load_batches(path: pathlib.Path) -> List[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("chainBatches", [data])
    if not isinstance(data, list):
        raise EncodingError("Expected a JSON list of chain batches")
    return data


@app.command("hash")
def hash_cmd(
    path: pathlib.Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file with chain batches"),
    as_json: bool = typer.Option(False, "--json", help="Print machine-readable output"),
):
    """Hash chain batches and compose the intent digest."""
    try:
        chain_authorizations = hash_chain_batches(_load_batches(path))
        digest = get_authorization_hash(chain_authorizations)
    except (ValueError, ValidationError, EncodingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps({
            "chainBatches": [a.model_dump(mode="json", by_alias=True) for a in chain_authorizations],
            "digest": to_hex(digest),
        }, indent=2))
        return

    for auth in chain_authorizations:
        typer.echo(f"chain {auth.chain_id}: {to_hex(auth.hash)}")
    typer.echo(f"digest: {to_hex(digest)}")


@app.command()
def status(
    intent_id: str = typer.Argument(..., help="Intent id returned on submission"),
    step: int = typer.Option(0, "--step", help="Step index"),
    tx_api_url: Optional[str] = typer.Option(None, "--tx-api-url", envvar=TX_API_URL_ENV, help="Relayer URL"),
    interval: float = typer.Option(DEFAULT_POLL_INTERVAL, "--interval", help="Seconds between polls"),
    timeout: float = typer.Option(DEFAULT_POLL_TIMEOUT, "--timeout", help="Give up after this many seconds"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Poll until the step is terminal"),
):
    """Show (or wait for) the status of an intent step."""
    if not tx_api_url:
        typer.echo(f"Error: --tx-api-url or {TX_API_URL_ENV} is required", err=True)
        raise typer.Exit(code=2)

    try:
        with RelayerClient(tx_api_url) as relayer:
            if wait:
                result = poll_intent_step(
                    relayer,
                    intent_id,
                    step_id=step,
                    interval=interval,
                    timeout=timeout,
                    on_update=lambda s: typer.echo(f"status: {s.data.status.value}")
                )
            else:
                result = relayer.get_intent_step_status(intent_id, step)
                typer.echo(f"status: {result.data.status.value}")
    except (ConfigError, StatusPollError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if result.data.transaction_hash:
        typer.echo(f"transaction: {result.data.transaction_hash}")
    if result.data.status == StepStatus.REVERTED:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
