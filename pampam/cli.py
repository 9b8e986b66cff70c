# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
"""pampam CLI - typer application entry point."""

from __future__ import annotations

import importlib
import logging
from contextlib import contextmanager
from typing import Annotated, Iterator, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .convert import convert_to_type_fields, convert_to_value_fields, diagnose_fields
from .errors import PamError, SigningError
from .operator import Operator
from .parser import parse_fields, validate_type_fields
from .remote import DEFAULT_ENDPOINT, GraphQLClient
from .signing import Signer

logger = logging.getLogger("pampam.cli")

app = typer.Typer(
    name="pampam",
    help="pampam: create schemas and documents on a node from the command line.",
    no_args_is_help=True,
)
create_app = typer.Typer(help="Create a schema or a document.", no_args_is_help=True)
update_app = typer.Typer(help="Update a document.", no_args_is_help=True)
delete_app = typer.Typer(help="Delete a document.", no_args_is_help=True)
schema_app = typer.Typer(help="Read schema definitions from the node.", no_args_is_help=True)
app.add_typer(create_app, name="create")
app.add_typer(update_app, name="update")
app.add_typer(delete_app, name="delete")
app.add_typer(schema_app, name="schema")

console = Console()

FieldsArg = Annotated[List[str], typer.Argument(help='Fields as "name: value", e.g. "age: int".')]


def configure_logging(verbosity: int = 0) -> None:
    """0=WARNING (default), 1=INFO, 2+=DEBUG"""
    levels = {0: logging.WARNING, 1: logging.INFO}
    level = levels.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=verbosity >= 1, show_path=verbosity >= 2)],
        force=True,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def load_signer(path: str) -> Signer:
    """Resolve "package.module:attr" to a Signer; callables are called with no arguments."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise SigningError(f'Signer must be given as "module:attr", got "{path}"')
    try:
        target = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise SigningError(f'Could not load signer "{path}": {e}') from e

    signer = target if isinstance(target, Signer) else target()
    if not isinstance(signer, Signer):
        raise SigningError(f'"{path}" did not provide a Signer')
    return signer


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Annotated[
        str,
        typer.Option("--endpoint", "-e", envvar="ENDPOINT", help="GraphQL endpoint of the node."),
    ] = DEFAULT_ENDPOINT,
    op_version: Annotated[
        int,
        typer.Option("--op-version", "-o", help="Operation format version."),
    ] = 1,
    signer: Annotated[
        Optional[str],
        typer.Option(
            "--signer",
            "-s",
            envvar="PAMPAM_SIGNER",
            help='Signing identity factory as "module:attr".',
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("-v", "--verbose", count=True, help="-v for INFO, -vv for DEBUG."),
    ] = 0,
) -> None:
    """pampam: create schemas and documents on a node from the command line."""
    configure_logging(verbose)
    ctx.obj = {"endpoint": endpoint, "op_version": op_version, "signer": signer}


def _operator(ctx: typer.Context, publishing: bool = True) -> Operator:
    settings = ctx.obj or {}
    signer = None
    if settings.get("signer"):
        signer = load_signer(settings["signer"])
    elif publishing:
        raise SigningError("No signing identity configured, pass --signer or set PAMPAM_SIGNER")

    client = GraphQLClient(settings.get("endpoint") or DEFAULT_ENDPOINT)
    return Operator(client=client, signer=signer, version=settings.get("op_version", 1))


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (PamError, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@create_app.command("schema")
def create_schema(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Schema name.")],
    description: Annotated[str, typer.Argument(help="Schema description.")],
    fields: FieldsArg,
) -> None:
    """Create a schema from "name: type" fields."""
    with _reporting_errors():
        pairs = parse_fields(fields)
        validate_type_fields(pairs)
        type_fields = convert_to_type_fields(pairs)

        res = _operator(ctx).create_schema(name, description, type_fields)

    console.print(f"schema_id: {escape(res['schema_id'])}")
    console.print(f"schema name: {escape(res['name'])}")


@create_app.command("document")
def create_document(
    ctx: typer.Context,
    schema_id: Annotated[str, typer.Argument(help="Id of the schema to instantiate.")],
    fields: FieldsArg,
) -> None:
    """Create a document from "name: value" fields."""
    with _reporting_errors():
        value_fields = convert_to_value_fields(parse_fields(fields))
        document_id = _operator(ctx).create_document(schema_id, value_fields)

    console.print(f"document_id: {escape(document_id)}")
    console.print(f"schema_id: {escape(schema_id)}")


@update_app.command("document")
def update_document(
    ctx: typer.Context,
    schema_id: Annotated[str, typer.Argument(help="Schema of the document.")],
    view_id: Annotated[str, typer.Argument(help="Document view to update.")],
    fields: FieldsArg,
) -> None:
    """Update a document with "name: value" fields."""
    with _reporting_errors():
        value_fields = convert_to_value_fields(parse_fields(fields))
        update_id = _operator(ctx).update_document(schema_id, view_id, value_fields)

    console.print(f"updated document_id: {escape(update_id)}")


@delete_app.command("document")
def delete_document(
    ctx: typer.Context,
    schema_id: Annotated[str, typer.Argument(help="Schema of the document.")],
    view_id: Annotated[str, typer.Argument(help="Document view to delete.")],
) -> None:
    """Delete a document."""
    with _reporting_errors():
        delete_id = _operator(ctx).delete_document(schema_id, view_id)

    console.print(f"deleted document_id: {escape(delete_id)}")


@schema_app.command("all")
def schema_all(ctx: typer.Context) -> None:
    """Print every schema definition known to the node."""
    with _reporting_errors():
        schemas = _operator(ctx, publishing=False).get_all_schema_definition()
    console.print_json(data=schemas)


@schema_app.command("show")
def schema_show(
    ctx: typer.Context,
    document_id: Annotated[str, typer.Argument(help="Schema definition document id.")],
    view_id: Annotated[str, typer.Argument(help="Schema definition view id.")],
) -> None:
    """Print one schema definition."""
    with _reporting_errors():
        schema = _operator(ctx, publishing=False).get_schema_definition(document_id, view_id)
    console.print_json(data=schema)


@app.command("check")
def check(
    mode: Annotated[str, typer.Argument(help='"type" for schema fields, "value" for document fields.')],
    fields: FieldsArg,
) -> None:
    """Report every malformed field without contacting the node."""
    with _reporting_errors():
        errors = diagnose_fields(fields, mode)

    if not errors:
        console.print(f"[green]✓[/green] {len(fields)} field(s) OK")
        return

    for error in errors:
        console.print(f"  [red]•[/red] {escape(str(error))}")
    raise typer.Exit(1)
