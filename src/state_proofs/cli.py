#!/usr/bin/env python3
"""
State Proofs CLI

Command-line interface for generating chained beacon/execution proofs.
Provides script-friendly commands for each proof stage and for the full
chained flow.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api.beacon_client import BeaconAPIClient, BeaconAPIError
from .api.execution_client import ExecutionClient, ExecutionProofError, log_proof_data
from .api.proof_service import ProofLinkageError, ProofService
from .main import BeaconProofResult, log_beacon_proof
from .models.api_models import BeaconProofBundle
from .ssz import MerkleProofError, parse_int

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

PROOF_ERRORS = (MerkleProofError, BeaconAPIError, ExecutionProofError, ProofLinkageError, ValueError)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_service(beacon_url: Optional[str] = None, execution_url: Optional[str] = None) -> ProofService:
    """Create a proof service, with explicit node URLs taking precedence over the environment."""
    return ProofService(
        beacon_client=BeaconAPIClient(base_url=beacon_url) if beacon_url else None,
        execution_client=ExecutionClient(rpc_url=execution_url) if execution_url else None,
    )


def parse_slot(value: str) -> int:
    try:
        slot = parse_int(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a decimal or 0x-prefixed hex integer")
    if slot < 0 or slot >= 2**256:
        raise click.BadParameter(f"storage slot {value} is not a uint256")
    return slot


def format_json(data: Dict[str, Any]) -> str:
    """Format a proof bundle for JSON output."""
    return json.dumps(data, indent=2)


def write_output(data: Dict[str, Any], output: Optional[str]):
    if output:
        with open(output, "w") as f:
            f.write(format_json(data))
        console.print(f"[green]Proof written to {output}[/green]")


def print_beacon_result(result: BeaconProofResult, format_output: str = "table"):
    """Print a beacon proof in various formats."""
    if format_output == "json":
        click.echo(format_json(result.to_dict()))
        return

    table = Table(title="Beacon Proof Results")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Fork", str(result.fork))
    table.add_row("Beacon Slot", str(result.slot))
    table.add_row("Beacon Block Root", f"0x{result.root.hex()}")
    table.add_row("Execution State Root", f"0x{result.leaf.hex()}")
    table.add_row("Execution Block Number", str(result.block_number))
    table.add_row("Execution Timestamp", str(result.timestamp))
    table.add_row("Generalized Index", str(result.index))
    table.add_row("Proof Steps", str(len(result.proof)))

    for key, value in result.metadata.items():
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)

    console.print("\n[bold cyan]Proof Steps (root to leaf):[/bold cyan]")
    for i, step in enumerate(result.proof):
        console.print(f"  {i:2d}: 0x{step.hex()}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    State Proofs CLI - Prove contract storage against a beacon block root.

    The beacon proof shows the execution state root is a leaf of a beacon
    block root; the storage proof shows a slot value is committed to by that
    state root. Both are anchored to the same execution block.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("block_id", default="finalized")
@click.option("--fork", envvar="BEACON_FORK", help="Fork layout of the block (deneb, electra, fulu)")
@click.option("--beacon-url", envvar="BEACON_RPC_URL", help="Beacon node REST URL")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the proof bundle as JSON to a file")
@click.option(
    "--format", "format_output", type=click.Choice(["table", "json"]), default="table",
    help="Output format",
)
def beacon(block_id: str, fork: Optional[str], beacon_url: Optional[str],
           output: Optional[str], format_output: str):
    """
    Prove the execution state root of a beacon block.

    BLOCK_ID: "finalized", "head", a slot number or a 0x block root
    """
    try:
        service = build_service(beacon_url=beacon_url)
        result = service.get_beacon_proof(block_id, fork)
        if not log_beacon_proof(result):
            raise click.ClickException("Generated beacon proof does not verify")
    except PROOF_ERRORS as e:
        logger.error(f"Error generating beacon proof: {e}")
        raise click.ClickException(str(e))

    print_beacon_result(result, format_output)
    write_output(result.to_dict(), output)


@cli.command()
@click.argument("address")
@click.argument("slot")
@click.option("--block", "block_number", type=int, help="Execution block number (defaults to latest)")
@click.option("--execution-url", envvar="EXECUTION_RPC_URL", help="Execution node JSON-RPC URL")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the proof bundle as JSON to a file")
def storage(address: str, slot: str, block_number: Optional[int],
            execution_url: Optional[str], output: Optional[str]):
    """
    Collect the storage proof and block header for a contract slot.

    ADDRESS: Contract address

    SLOT: Storage slot, decimal or 0x hex
    """
    storage_slot = parse_slot(slot)
    try:
        service = build_service(execution_url=execution_url)
        data = service.get_storage_proof(address, storage_slot, block_number)
    except PROOF_ERRORS as e:
        logger.error(f"Error collecting storage proof: {e}")
        raise click.ClickException(str(e))

    log_proof_data(data)
    click.echo(format_json(data.to_dict()))
    write_output(data.to_dict(), output)


@cli.command()
@click.argument("address")
@click.argument("slot")
@click.option("--block-id", default="finalized", help="Beacon block identifier")
@click.option("--fork", envvar="BEACON_FORK", help="Fork layout of the block (deneb, electra, fulu)")
@click.option("--beacon-url", envvar="BEACON_RPC_URL", help="Beacon node REST URL")
@click.option("--execution-url", envvar="EXECUTION_RPC_URL", help="Execution node JSON-RPC URL")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the proof bundle as JSON to a file")
def generate(address: str, slot: str, block_id: str, fork: Optional[str],
             beacon_url: Optional[str], execution_url: Optional[str], output: Optional[str]):
    """
    Generate the chained beacon and storage proofs.

    The beacon proof is built first; the storage proof is then taken at the
    execution block anchored in it. Without a beacon node URL the beacon
    stage is skipped and the storage proof is taken at the latest block.

    ADDRESS: Contract address

    SLOT: Storage slot, decimal or 0x hex
    """
    storage_slot = parse_slot(slot)
    try:
        service = build_service(beacon_url=beacon_url, execution_url=execution_url)
        if beacon_url:
            chained = service.get_chained_proof(address, storage_slot, block_id=block_id, fork=fork)
            log_beacon_proof(chained.beacon)
            log_proof_data(chained.execution)
            bundle = chained.to_dict()
        else:
            logger.info("No beacon node URL configured, skipping beacon proof")
            console.print("[yellow]No beacon node URL configured, skipping beacon proof[/yellow]")
            data = service.get_storage_proof(address, storage_slot)
            log_proof_data(data)
            bundle = {"beacon": None, "execution": data.to_dict()}
    except PROOF_ERRORS as e:
        logger.error(f"Error generating chained proof: {e}")
        raise click.ClickException(str(e))

    click.echo(format_json(bundle))
    write_output(bundle, output)


@cli.command()
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False))
def verify(proof_file: str):
    """
    Re-verify a saved beacon proof bundle.

    PROOF_FILE: JSON written by `beacon --output` or `generate --output`
    """
    try:
        with open(proof_file) as f:
            data = json.load(f)
        if isinstance(data, dict) and "execution" in data:
            if data.get("beacon") is None:
                raise click.ClickException("Proof file has no beacon proof to verify")
            data = data["beacon"]
        bundle = BeaconProofBundle.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.ClickException(f"Invalid proof file {proof_file}: {e}")

    table = Table(title="Beacon Proof Verification")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Root", bundle.root)
    table.add_row("Leaf", bundle.leaf)
    table.add_row("Generalized Index", str(bundle.index))
    table.add_row("Proof Steps", str(len(bundle.proof)))
    console.print(table)

    if not bundle.verify():
        raise click.ClickException("Proof is INVALID")
    console.print("[bold green]Proof is valid[/bold green]")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: str, port: int, dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    try:
        console.print(
            Panel(
                f"Starting State Proofs API Server\n\n"
                f"Server: http://{host}:{port}\n"
                f"Docs: http://{host}:{port}/docs\n"
                f"Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.option("--beacon-url", envvar="BEACON_RPC_URL", help="Beacon node REST URL")
@click.option("--execution-url", envvar="EXECUTION_RPC_URL", help="Execution node JSON-RPC URL")
def health(beacon_url: Optional[str], execution_url: Optional[str]):
    """Check the health of the configured nodes."""
    console.print("[cyan]Checking node health...[/cyan]")

    service = build_service(beacon_url=beacon_url, execution_url=execution_url)
    status = service.health()

    table = Table(title="System Health Check")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_row("Beacon API", "Healthy" if status["beacon_api"] else "Unhealthy")
    table.add_row("Execution API", "Healthy" if status["execution_api"] else "Unhealthy")
    console.print(table)

    if not all(status.values()):
        sys.exit(1)


if __name__ == "__main__":
    cli()
