"""api-test CLI - send GET/POST requests and keep a local history."""

import json
import sys

import click

from apitest.core import (
    ConfigError,
    OptionParseError,
    default_config_path,
    load_config,
    parse_options,
    resolve_history_path,
)
from apitest.formatting import format_error, format_history, format_response
from apitest.history import HistoryStore, make_record

TOOL_HELP = """\
api-test — send HTTP requests from the command line.

Prints status, headers and body of each response and appends every
request to a local history file.

\b
EXAMPLES
────────
  api-test get https://example.com/users -q page=2,limit=10
  api-test get https://example.com/me -H "Accept=application/json"
  api-test post https://example.com/users -d '{"name": "test"}'
  api-test history

\b
OPTION STRINGS
──────────────
  -q and -H take comma-separated key=value pairs. Keys and values are
  trimmed and the last duplicate key wins. Values cannot contain ',' or
  '=' (there is no escaping).

\b
CONFIG FILE (~/.api_test.yaml)
──────────────────────────────
  \b
  defaults:
    headers:                         # sent with every request
      Accept: application/json
    history_file: ~/.api_test_history.json

\b
HISTORY
───────
  Requests are stored in $HOME/.api_test_history.json unless
  --history-file or history_file in the config says otherwise.
"""

REDACTED_HEADERS = {"authorization", "proxy-authorization"}


def _option_string(ctx, param, value):
    """click callback: parse a key=value,... option string."""
    try:
        return parse_options(value)
    except OptionParseError as e:
        raise click.BadParameter(str(e)) from e


def _json_body(ctx, param, value):
    """click callback: the -d body must be valid JSON."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}") from e


@click.group(
    help=TOOL_HELP,
    invoke_without_command=True,
    context_settings={"max_content_width": 88},
)
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    help="Config file path. Default: ~/.api_test.yaml.",
)
@click.option(
    "--history-file",
    "history_file",
    default=None,
    help="History file path. Default: $HOME/.api_test_history.json.",
)
@click.pass_context
def main(ctx, config_file, history_file):
    """Send HTTP requests and keep a local history."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        config = load_config(config_file or default_config_path())
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    ctx.obj = {
        "config": config,
        "store": HistoryStore(resolve_history_path(history_file, config)),
    }


@main.command("get")
@click.argument("url")
@click.option(
    "-q",
    "--query",
    default=None,
    callback=_option_string,
    help="Query parameters, e.g. 'key=value,key2=value2'.",
)
@click.option(
    "-H",
    "--header",
    "headers",
    default=None,
    callback=_option_string,
    help="Custom headers, e.g. 'key=value,key2=value2'.",
)
@click.pass_context
def get_cmd(ctx, url, query, headers):
    """Send a GET request to an API endpoint."""
    _cmd_send(ctx, "get", url, headers=headers, query=query)


@main.command("post")
@click.argument("url")
@click.option(
    "-d",
    "--data",
    default=None,
    callback=_json_body,
    help="JSON body for the request.",
)
@click.option(
    "-H",
    "--header",
    "headers",
    default=None,
    callback=_option_string,
    help="Custom headers, e.g. 'key=value,key2=value2'.",
)
@click.pass_context
def post_cmd(ctx, url, data, headers):
    """Send a POST request to an API endpoint."""
    _cmd_send(ctx, "post", url, headers=headers, data=data)


@main.command("history")
@click.pass_context
def history_cmd(ctx):
    """Show request history."""
    store = ctx.obj["store"]
    click.echo(format_history(store.load()))


# ── Subcommand implementations ──────────────────────────────────────────


def _cmd_send(ctx, method, url, headers=None, query=None, data=None):
    from apitest import executor

    defaults = ctx.obj["config"].get("defaults", {})
    headers = {**_default_headers(defaults), **(headers or {})}
    query = query or {}

    try:
        result = executor.execute_request(
            method=method,
            url=url,
            headers=headers,
            query=query,
            data=data,
        )
    except executor.TransportError as e:
        click.echo(format_error(e), err=True)
        sys.exit(1)
    except executor.RemoteError as e:
        click.echo(format_error(e), err=True)
        return

    click.echo(format_response(result))
    _save_to_history(
        ctx.obj["store"], method, url, headers, query, data, result.status_code
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _default_headers(defaults):
    headers = defaults.get("headers") or {}
    return {str(k): str(v) for k, v in headers.items()}


def _save_to_history(store, method, url, headers, query, data, status):
    """Append the request to history; report, but don't fail, on write errors."""
    safe = {k: v for k, v in headers.items() if k.lower() not in REDACTED_HEADERS}
    record = make_record(method, url, headers=safe, query=query, data=data, status=status)
    try:
        store.append(record)
    except OSError as e:
        click.echo(
            click.style(f"Could not write history to {store.path}: {e}", fg="red"),
            err=True,
        )
