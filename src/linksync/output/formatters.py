"""Rich/JSON output helpers.

The CLI renders a ServiceResult for humans (Rich text) or machines
(``--json``). Human renderers are dispatched by ``result.op``; unknown
ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.text import Text

from linksync.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from linksync.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be rendered."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet, quiet wins over the default human rendering.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2, exclude_none=True)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)


def render_quiet(result: ServiceResult) -> str:
    """Render one line (or one path per line for listings)."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item) for item in items)
    if result.data.get("skipped"):
        return f"SKIPPED: {result.op}"
    count = result.data.get("count")
    return f"OK: {result.op}" if count is None else f"OK: {result.op} {count}"


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    if result.data.get("skipped"):
        label = Text("SKIPPED", style="ls.skip")
    else:
        label = Text("OK", style="ls.ok")
    label.append(f"  {result.op}", style="ls.op")
    console.print(label)


def _field(console: Console, key: str, value: Any) -> None:
    line = Text(f"  {key}: ", style="ls.key")
    if key in ("path", "old_path"):
        line.append(str(value), style="ls.path")
    elif key in ("count", "documents"):
        line.append(str(value), style="ls.count")
    else:
        line.append(str(value))
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_telemetry_tree(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="ls.error"), Text(f"  {result.op}", style="ls.op"), msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


def _render_update(result: ServiceResult, console: Console) -> None:
    """update_note / update_all: what was scanned and how many links changed."""
    _status_line(console, result)
    for key in ("path", "documents", "count"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_backlinks(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "path", data["path"])
    if data.get("old_path") and data["old_path"] != data["path"]:
        _field(console, "old_path", data["old_path"])
    if data.get("skipped"):
        return
    _field(console, "count", data.get("count"))
    _render_paths(console, "referrers", data.get("referrers", []))


def _render_referrers(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "path", result.data["path"])
    _field(console, "count", result.data["count"])
    _render_paths(console, "items", result.data.get("items", []))


def _render_paths(console: Console, label: str, paths: list[str]) -> None:
    if not paths:
        return
    console.print(Text(f"  {label}:", style="ls.key"))
    for path in paths:
        console.print(Text(f"    {path}", style="ls.path"))


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "update_note": _render_update,
    "update_all": _render_update,
    "update_back_links": _render_backlinks,
    "referrers": _render_referrers,
}
