"""Protocol Dispatcher CLI.

Inspect a protocol definition and check calls against it.

Usage:
    protocol-dispatcher describe protocol.json             # List domains
    protocol-dispatcher describe protocol.json Page        # Commands and events of Page
    protocol-dispatcher describe protocol.json -f json     # JSON output
    protocol-dispatcher check protocol.json Page.navigate --params '{"url": "http://x"}'
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click
from pydantic import ValidationError

from .errors import SchemaError
from .messages import split_method
from .schema import ProtocolDefinition, SchemaIndex
from .validation import validate_params

# Output format options
FORMAT_TABLE = "table"
FORMAT_JSON = "json"


def _load_index(path: str) -> SchemaIndex:
    try:
        protocol = ProtocolDefinition.from_file(path)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise click.ClickException(f"{path} is not a protocol definition:\n{e}") from e
    return SchemaIndex(protocol)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level (logs go to stderr)",
)
def main(log_level: str) -> None:
    """Protocol Dispatcher - inspect protocol definitions and check calls."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("protocol_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("domain", required=False)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([FORMAT_TABLE, FORMAT_JSON]),
    default=FORMAT_TABLE,
    help="Output format",
)
def describe(protocol_file: str, domain: str | None, output_format: str) -> None:
    """List domains, or the commands and events of one DOMAIN.

    Examples:

        protocol-dispatcher describe protocol.json

        protocol-dispatcher describe protocol.json Network --format json
    """
    index = _load_index(protocol_file)

    if domain is None:
        _describe_domains(index, output_format)
        return

    definition = index.domain_definition(domain)
    if definition is None:
        raise click.ClickException(f"unknown namespace: {domain}")

    if output_format == FORMAT_JSON:
        click.echo(
            json.dumps(
                definition.model_dump(by_alias=True, exclude_none=True),
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    click.echo(f"Domain: {definition.name}")
    click.echo("\nCommands:")
    for name, info in index.domain_commands(domain).items():
        click.echo(f"  {name}({_format_params(info['parameters'])})")

    events = index.domain_event_names(domain)
    click.echo("\nEvents:")
    for name in events:
        click.echo(f"  {name}")
    if not events:
        click.echo("  (none)")


def _describe_domains(index: SchemaIndex, output_format: str) -> None:
    rows: list[dict[str, Any]] = [
        {
            "domain": name,
            "commands": len(index.domain_command_names(name)),
            "events": len(index.domain_event_names(name)),
        }
        for name in index.domains
    ]

    if output_format == FORMAT_JSON:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No domains defined.")
        return

    click.echo(f"{'Domain':<30} {'Commands':>8} {'Events':>8}")
    click.echo("-" * 48)
    for row in rows:
        click.echo(f"{row['domain']:<30} {row['commands']:>8} {row['events']:>8}")
    click.echo(f"\nTotal: {len(rows)} domain(s)")


def _format_params(parameters: list[Any] | None) -> str:
    if not parameters:
        return ""
    return ", ".join(f"{p.name}?" if p.optional is True else p.name for p in parameters)


@main.command()
@click.argument("protocol_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("method")
@click.option("--params", "-p", "params_json", default="{}", help="Parameters as a JSON object")
def check(protocol_file: str, method: str, params_json: str) -> None:
    """Check whether METHOD (Domain.command) may be sent with --params.

    Examples:

        protocol-dispatcher check protocol.json Page.navigate -p '{"url": "http://x"}'
    """
    index = _load_index(protocol_file)

    try:
        params = json.loads(params_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--params") from e
    if not isinstance(params, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--params")

    domain, command = split_method(method)
    try:
        validate_params(index, domain, command, params)
    except SchemaError as e:
        click.echo(f"FAIL: {e}", err=True)
        sys.exit(1)

    click.echo(f"OK: {method}")


if __name__ == "__main__":
    main()
