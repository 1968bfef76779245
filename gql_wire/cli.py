"""Command-line interface for gql-wire."""

import asyncio
import json
import logging
import sys

import click

from .core.config import EndpointConfig
from .core.dispatch import custom_query_task
from .core.engine import HttpxEngine
from .core.outcome import DecodeError, TransportError
from .core.request import GraphQLRequest

EXIT_TRANSPORT_ERROR = 1
EXIT_DECODE_ERROR = 2


def parse_header(_ctx, _param, values: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
    """Parse repeated NAME:VALUE options into header pairs."""
    headers = []
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME:VALUE, got {value!r}")
        headers.append((name.strip(), header_value.strip()))
    return tuple(headers)


def parse_variables(_ctx, _param, value: str | None) -> dict | None:
    if value is None:
        return None
    try:
        variables = json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"Invalid JSON: {e}") from e
    if not isinstance(variables, dict):
        raise click.BadParameter("Variables must be a JSON object")
    return variables


async def _send(config: EndpointConfig, request: GraphQLRequest):
    async with HttpxEngine() as engine:
        return await custom_query_task(config, request).run(engine)


@click.group()
@click.version_option(package_name="gql-wire")
def main():
    """Send GraphQL requests over HTTP."""
    pass


@main.command()
@click.option(
    "--url",
    "-u",
    required=True,
    envvar="GQL_WIRE_URL",
    help="GraphQL endpoint URL (or set GQL_WIRE_URL).",
)
@click.option(
    "--query",
    "-q",
    "query_file",
    required=True,
    type=click.File("r"),
    help="File containing the GraphQL document ('-' for stdin).",
)
@click.option("--variables", callback=parse_variables, help="Variables as a JSON object.")
@click.option(
    "--method",
    "-X",
    type=click.Choice(["GET", "POST"]),
    default="POST",
    show_default=True,
    help="HTTP method. GET sends the document in the query string.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    callback=parse_header,
    help="Extra header as NAME:VALUE. Repeatable.",
)
@click.option("--timeout", type=click.IntRange(min=1), help="Timeout in milliseconds.")
@click.option("--operation-name", help="Operation name to send with the document.")
@click.option("--credentials", is_flag=True, help="Send credentials (cookies).")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def send(query_file, url, variables, method, headers, timeout, operation_name, credentials, verbose):
    """Send a GraphQL document and print the response data as JSON.

    Examples:

        gql-wire send -u https://api.example.com/graphql -q viewer.graphql

        echo '{ viewer { login } }' | gql-wire send -u $URL -q - -X GET
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = EndpointConfig(
        url=url,
        method=method,
        headers=headers,
        timeout_ms=timeout,
        credential_mode=credentials,
        operation_name=operation_name,
    )
    request = GraphQLRequest.query(query_file.read(), variables)
    outcome = asyncio.run(_send(config, request))

    if isinstance(outcome, TransportError):
        click.echo(outcome.describe(), err=True)
        sys.exit(EXIT_TRANSPORT_ERROR)

    for error in outcome.errors:
        click.echo(f"error: {error.message}", err=True)
    if isinstance(outcome, DecodeError):
        click.echo(outcome.detail, err=True)
        sys.exit(EXIT_DECODE_ERROR)

    click.echo(json.dumps(outcome.data, indent=2))


if __name__ == "__main__":
    main()
