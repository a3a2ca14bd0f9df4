"""Command-line interface.

Commands are grouped the way the web app's records are: ``page``,
``block``, ``collection`` and ``user``, plus ``auth`` helpers.  Every
command prints one JSON document (sorted keys) to stdout or ``--output``.

Global options fall back to environment variables, then to the
credential file (``~/.nocli.json`` by default).
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

import click

from nocli._version import __version__
from nocli.auth import import_curl_auth
from nocli.client import DEFAULT_COLLECTION_LIMIT, NocliClient
from nocli.config import NocliConfig, resolve_config
from nocli.credentials import read_credentials
from nocli.errors import NocliError, NocliInputError
from nocli.models import FetchEndpoint
from nocli.observability import configure_logging
from nocli.utils.output import write_json
from nocli.utils.redact import mask_secret

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

OBJECT_ENTRY_POINTS = """\
Available object entry points:
  nocli page objects <page-url-or-id>      # Flatten page recordMap tables
  nocli page objects <page> --table block --notion-block-like
                                            # Notion-like block objects
  nocli page types <page-url-or-id>         # Seen block types vs public API types
  nocli block get <block-id> --notion-block-like
                                            # Single block as normalized object
  nocli block children <block-id>           # Direct child block objects
  nocli collection query <collection-id> <view-id> --flatten
                                            # Collection/view object rows
  nocli user get <user-id>...               # User records"""

TOP_LEVEL_HELP = """\
Usage: nocli <command> [flags]

CLI for Notion browser/private endpoints

Common commands:
  nocli page fetch <url-or-id>
  nocli page objects <url-or-id>
  nocli block get <block-id>
  nocli collection query <collection-id> <view-id>
  nocli auth import-curl

Run 'nocli --help' for full help."""

AUTH_BOOTSTRAP_HINT = """
No auth config found.
Quick setup:
  1) Open Notion in browser and sign in.
  2) DevTools -> Network -> pick a /api/v3/... request.
  3) Right click -> Copy -> Copy as cURL.
  4) Run: pbpaste | nocli auth import-curl"""


@dataclass
class CliState:
    """Global options, resolved lazily into a client by commands that need one."""

    config_path: str | None
    overrides: dict[str, Any]

    def resolve(self) -> NocliConfig:
        credentials = read_credentials(self.config_path)
        return resolve_config(credentials, **self.overrides)


def cli_error(exc: NocliError) -> click.ClickException:
    """Turn a :class:`NocliError` into a Click-friendly error."""
    return click.ClickException(exc.message)


def with_client(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Click helper to build the client, write the result and map errors."""

    @wraps(handler)
    @click.pass_context
    def wrapper(ctx: click.Context, *args: Any, **kwargs: Any) -> None:
        state: CliState = ctx.obj
        output = kwargs.pop("output", None)
        try:
            with NocliClient(state.resolve()) as client:
                result = handler(client, *args, **kwargs)
            if hasattr(result, "to_dict"):
                result = result.to_dict()
            write_json(result, output)
        except NocliError as exc:
            raise cli_error(exc) from exc
        except ValueError as exc:
            raise click.UsageError(str(exc)) from exc

    return wrapper


def output_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False, writable=True),
        help="Write JSON output to this file instead of stdout.",
    )(func)


def notion_block_like_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--notion-block-like",
        is_flag=True,
        help="Emit Notion-like block object shape.",
    )(func)


def _has_auth_material(state: CliState) -> bool:
    try:
        return state.resolve().has_auth_material
    except (NocliError, ValueError):
        return False


@click.group(invoke_without_command=True)
@click.option("--config", "config_path", envvar="NOTION_CONFIG", help="Path to config file.")
@click.option("--base-url", envvar="NOTION_BASE_URL", help="Notion base URL.")
@click.option("--token-v2", envvar="NOTION_TOKEN_V2", help="Notion token_v2 cookie value.")
@click.option("--notion-user-id", envvar="NOTION_USER_ID", help="notion_user_id cookie value.")
@click.option(
    "--active-user-id",
    envvar="NOTION_ACTIVE_USER_ID",
    help="x-notion-active-user-header value.",
)
@click.option(
    "--cookie",
    envvar="NOTION_COOKIE",
    help="Raw Cookie header (overrides token_v2/notion_user_id).",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=float,
    default=30.0,
    show_default=True,
    help="Per-request timeout in seconds.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Structured log verbosity (stderr).",
)
@click.option("--debug-dump", is_flag=True, help="Dump redacted requests and responses to stderr.")
@click.version_option(__version__, prog_name="nocli")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    base_url: str | None,
    token_v2: str | None,
    notion_user_id: str | None,
    active_user_id: str | None,
    cookie: str | None,
    timeout_seconds: float,
    log_level: str,
    debug_dump: bool,
) -> None:
    """CLI for Notion browser/private endpoints."""
    configure_logging(log_level)
    ctx.obj = CliState(
        config_path=config_path,
        overrides={
            "base_url": base_url,
            "token_v2": token_v2,
            "notion_user_id": notion_user_id,
            "active_user_id": active_user_id,
            "cookie": cookie,
            "timeout_seconds": timeout_seconds,
            "debug_dump_payload": debug_dump,
        },
    )
    if ctx.invoked_subcommand is None:
        click.echo(TOP_LEVEL_HELP)
        if not _has_auth_material(ctx.obj):
            click.echo(AUTH_BOOTSTRAP_HINT)


# ---------------------------------------------------------------------------
# page
# ---------------------------------------------------------------------------

@cli.group()
def page() -> None:
    """Page operations."""


@page.command("fetch")
@click.argument("url_or_id")
@click.option(
    "--endpoint",
    type=click.Choice([e.value for e in FetchEndpoint]),
    default=FetchEndpoint.AUTO.value,
    show_default=True,
    help="Endpoint strategy to use.",
)
@output_option
@with_client
def page_fetch(client: NocliClient, url_or_id: str, endpoint: str) -> dict[str, Any]:
    """Fetch a page via Notion private endpoints."""
    return client.fetch_page(url_or_id, endpoint)


@page.command("objects")
@click.argument("url_or_id")
@click.option("--table", help="Filter by table name (block, collection, notion_user, ...).")
@click.option("--block-type", help="Filter blocks by block type.")
@notion_block_like_option
@output_option
@with_client
def page_objects(
    client: NocliClient,
    url_or_id: str,
    table: str | None,
    block_type: str | None,
    notion_block_like: bool,
) -> Any:
    """Expose flattened objects from a page recordMap."""
    return client.page_objects(url_or_id, table, block_type, notion_block_like)


@page.command("types")
@click.argument("url_or_id")
@output_option
@with_client
def page_types(client: NocliClient, url_or_id: str) -> Any:
    """List block types seen in a page vs official Notion API block types."""
    return client.page_types(url_or_id)


# ---------------------------------------------------------------------------
# block
# ---------------------------------------------------------------------------

@cli.group()
def block() -> None:
    """Block operations."""


@block.command("get")
@click.argument("block_id")
@notion_block_like_option
@output_option
@with_client
def block_get(client: NocliClient, block_id: str, notion_block_like: bool) -> Any:
    """Fetch a block record by ID."""
    return client.get_block(block_id, notion_block_like)


@block.command("children")
@click.argument("block_id")
@notion_block_like_option
@output_option
@with_client
def block_children(client: NocliClient, block_id: str, notion_block_like: bool) -> Any:
    """Fetch one-level child blocks."""
    return client.block_children(block_id, notion_block_like)


# ---------------------------------------------------------------------------
# collection / user
# ---------------------------------------------------------------------------

@cli.group()
def collection() -> None:
    """Collection operations."""


@collection.command("query")
@click.argument("collection_id")
@click.argument("view_id")
@click.option("--limit", type=int, default=DEFAULT_COLLECTION_LIMIT, show_default=True, help="Result limit.")
@click.option("--flatten", is_flag=True, help="Emit flattened objects instead of raw response.")
@output_option
@with_client
def collection_query(
    client: NocliClient,
    collection_id: str,
    view_id: str,
    limit: int,
    flatten: bool,
) -> Any:
    """Query a collection view."""
    return client.query_collection(collection_id, view_id, limit, flatten)


@cli.group()
def user() -> None:
    """User operations."""


@user.command("get")
@click.argument("user_ids", nargs=-1, required=True)
@output_option
@with_client
def user_get(client: NocliClient, user_ids: tuple[str, ...]) -> Any:
    """Fetch user records by ID."""
    return client.get_users(list(user_ids))


# ---------------------------------------------------------------------------
# auth / objects
# ---------------------------------------------------------------------------

@cli.group()
def auth() -> None:
    """Authentication helpers."""


def _read_paste(input_path: str | None) -> str:
    try:
        if input_path:
            with open(input_path, encoding="utf-8") as fh:
                return fh.read()
        if sys.stdin.isatty():
            click.echo("Paste Notion 'Copy as cURL' output, then press Ctrl-D:", err=True)
        return sys.stdin.read()
    except (UnicodeDecodeError, OSError) as exc:
        raise NocliInputError(
            f"could not read pasted cURL: {exc}",
            context={"input": input_path or "<stdin>"},
            cause=exc,
        ) from exc


@auth.command("import-curl")
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a text file containing copied cURL.",
)
@click.option("--store-cookie", is_flag=True, help="Also store full Cookie header in config.")
@click.pass_context
def auth_import_curl(ctx: click.Context, input_path: str | None, store_cookie: bool) -> None:
    """Import auth from a pasted Notion DevTools 'Copy as cURL' request."""
    state: CliState = ctx.obj
    try:
        summary = import_curl_auth(
            _read_paste(input_path),
            state.config_path,
            store_cookie=store_cookie,
        )
    except NocliError as exc:
        raise cli_error(exc) from exc

    click.echo(f"updated config: {summary.path}")
    if summary.token_v2:
        click.echo(f"- token_v2: {mask_secret(summary.token_v2)}")
    if summary.notion_user_id:
        click.echo(f"- notion_user_id: {summary.notion_user_id}")
    if summary.active_user_id:
        click.echo(f"- active_user_id: {summary.active_user_id}")
    if summary.cookie_stored:
        click.echo("- cookie: stored")
    if not summary.is_complete:
        click.echo("warning: token_v2 or notion_user_id missing from pasted data")


@cli.command("objects")
def objects() -> None:
    """List object-oriented entry points."""
    click.echo(OBJECT_ENTRY_POINTS)


def main() -> None:  # pragma: no cover - console entry point
    """Console entry hook."""
    cli(prog_name="nocli")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
