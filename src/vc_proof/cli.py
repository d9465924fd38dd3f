"""
Command-line interface for vc-proof.

Usage:
    vc-proof-verify credential.json
    vc-proof-verify --did-document issuer-did.json credential.json
    vc-proof-verify https://example.com/credentials/123
    cat presentation.json | vc-proof-verify -
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vc_proof.did_resolver import CompositeDIDResolver, DIDWebResolver, StaticDIDResolver
from vc_proof.exceptions import ProofValidationError
from vc_proof.logging_config import configure_logging
from vc_proof.verifier import VerificationResult, VerificationStatus, verify_document


console = Console()


def format_result(result: VerificationResult) -> None:
    """Format and print verification result."""
    if result.status == VerificationStatus.VALID:
        status_icon = "[bold green]VALID[/]"
        panel_style = "green"
    elif result.status == VerificationStatus.INVALID:
        status_icon = "[bold red]INVALID[/]"
        panel_style = "red"
    else:
        status_icon = "[bold yellow]ERROR[/]"
        panel_style = "yellow"

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Status", status_icon)
    table.add_row("Document Type", result.document_type.value)

    if result.document_id:
        table.add_row("Document ID", result.document_id)

    if result.issuer:
        table.add_row("Issuer", result.issuer)

    if result.proof_type:
        table.add_row("Proof Type", result.proof_type)

    if result.verification_method:
        table.add_row("Verification Method", result.verification_method)

    console.print(Panel(table, title="Verification Result", border_style=panel_style))

    if result.errors:
        console.print("\n[bold red]Errors:[/]")
        for error in result.errors:
            console.print(f"  [red]x[/] {error}")


def load_json(source: str, timeout: float = 30.0) -> Any:
    """Load a JSON document from file, URL, or stdin.

    Args:
        source: File path, URL, or "-" for stdin.
        timeout: HTTP request timeout in seconds.

    Returns:
        Parsed JSON.
    """
    if source == "-":
        return json.loads(sys.stdin.read())

    if source.startswith("http://") or source.startswith("https://"):
        with httpx.Client(timeout=timeout) as client:
            response = client.get(
                source,
                headers={"Accept": "application/vc+ld+json, application/json"},
            )
            response.raise_for_status()
            return response.json()

    path = Path(source)
    if not path.exists():
        raise click.ClickException(f"File not found: {source}")

    with path.open() as f:
        return json.load(f)


def load_did_document(path: Path) -> dict[str, Any]:
    """Load a DID Document given with --did-document."""
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise click.ClickException(f"DID Document {path} must be a JSON object")
    return data


def _print_error(message: str, json_output: bool) -> None:
    if json_output:
        console.print_json(data={"error": message})
    else:
        console.print(f"[red]Error:[/] {message}")


@click.command()
@click.argument("source", required=True)
@click.option(
    "--did-document",
    "did_documents",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="DID Document to resolve locally instead of over did:web (repeatable)",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    help="Disable SSL certificate verification",
)
@click.option(
    "--json-output",
    is_flag=True,
    help="Output result as JSON",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    help="HTTP request timeout in seconds",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log verification steps to stderr",
)
@click.version_option(package_name="vc-proof")
def main(
    source: str,
    did_documents: tuple[Path, ...],
    no_ssl_verify: bool,
    json_output: bool,
    timeout: float,
    verbose: bool,
) -> None:
    """Verify the Linked Data proof of a Verifiable Credential or Presentation.

    SOURCE can be:
    - A file path (e.g., credential.json)
    - A URL (e.g., https://example.com/credentials/123)
    - "-" to read from stdin

    Exit status is 0 when the document is valid, 1 when it is invalid and 2
    when it could not be verified.
    """
    configure_logging(verbose=verbose)

    try:
        document = load_json(source, timeout=timeout)
        if not isinstance(document, dict):
            raise click.ClickException("Document must be a JSON object")

        static_resolver = StaticDIDResolver(load_did_document(path) for path in did_documents)
        did_resolver = CompositeDIDResolver(
            static_resolver,
            DIDWebResolver(timeout=timeout, verify_ssl=not no_ssl_verify),
        )

        result = verify_document(document, did_resolver=did_resolver)

        if json_output:
            console.print_json(data=result.to_dict())
        else:
            format_result(result)

        if result.status == VerificationStatus.ERROR:
            sys.exit(2)
        sys.exit(0 if result.is_valid else 1)

    except json.JSONDecodeError as e:
        _print_error(f"Invalid JSON: {e}", json_output)
        sys.exit(2)

    except httpx.HTTPError as e:
        _print_error(f"HTTP error: {e}", json_output)
        sys.exit(2)

    except ProofValidationError as e:
        _print_error(str(e), json_output)
        sys.exit(2)

    except click.ClickException as e:
        _print_error(e.format_message(), json_output)
        sys.exit(2)


if __name__ == "__main__":
    main()
