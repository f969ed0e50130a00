"""api-test formatting - colored console output for responses and history."""

import json

import click


def _to_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def format_response(result) -> str:
    """Format a successful RequestResult as status, headers and body."""
    lines = [
        click.style(f"Status: {result.status_code} {result.status_text}".rstrip(), fg="green"),
        click.style("Headers:", fg="blue"),
        _to_json(result.headers),
        click.style("Body:", fg="blue"),
        _to_json(result.body),
    ]
    return "\n".join(lines)


def format_error(error) -> str:
    """Format a RequestError.

    Server responses show their body; transport failures show the message.
    """
    lines = [click.style("Error:", fg="red")]
    result = getattr(error, "result", None)
    if result is not None and result.body not in (None, ""):
        lines.append(_to_json(result.body))
    else:
        lines.append(str(error))
    return "\n".join(lines)


def format_history(entries: list) -> str:
    records = [entry for entry in entries if isinstance(entry, dict)]
    if not records:
        return click.style("No history found.", fg="yellow")

    lines: list[str] = []
    for i, entry in enumerate(records, start=1):
        method = str(entry.get("method", "?")).upper()
        url = entry.get("url", "?")
        lines.append(click.style(f"Request {i}: {method} {url}", fg="cyan"))
        lines.append(f"Timestamp: {entry.get('timestamp', '')}")
        lines.append(f"Status: {entry.get('status', '')}")
        lines.append("---")
    return "\n".join(lines)
