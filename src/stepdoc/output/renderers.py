"""Human-readable rendering of ServiceResult.

Mutations print the touched entity as ``key: value`` lines (never the full
document), ``get_document`` prints the document as a tree, and
``list_groups`` as a table. Ops without a dedicated renderer print every
data key except the document.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from stepdoc.output.console import STEP_ICONS, create_console, get_output, style_for_group

if TYPE_CHECKING:
    from rich.console import Console

    from stepdoc.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]

# Order in which mutation fields are printed; absent keys are skipped.
MUTATION_FIELDS = (
    "id",
    "source_id",
    "title",
    "type",
    "style",
    "isCollapsed",
    "group_id",
    "from_group_id",
    "index",
    "step_count",
    "fields_changed",
    "deleted_steps",
    "moved",
)

SUMMARY_KEYS = ("content", "code", "html", "caption", "alt", "src", "name", "url")


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* with Rich and return the text."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console)
        if verbose:
            _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """``--quiet`` output: ids only, one per line, or a one-line status."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {message}"
    items = result.data.get("items")
    if isinstance(items, list) and items:
        return "\n".join(str(i["id"]) for i in items if isinstance(i, dict) and "id" in i)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Building blocks ───────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "sd.ok"), (f"  {result.op}", "sd.op")))


def _value_text(key: str, value: Any) -> Text:
    if key == "id" or key.endswith("_id"):
        return Text(str(value), style="sd.id")
    if key == "title":
        return Text(str(value), style="sd.title")
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, separators=(",", ":")))
    return Text(str(value))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "sd.key"), _value_text(key, value)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, depth=1)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], depth: int) -> None:
    """One line per span, children indented under their parent."""
    duration = span.get("duration_ms", 0.0)
    line = Text("    " * depth)
    line.append(f"{duration:>8.2f}ms", style="yellow" if duration > 100 else "dim")
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, depth + 1)


def _step_summary(step: dict[str, Any]) -> str:
    """First non-empty payload line, truncated to 60 chars."""
    payload = step.get("payload") or {}
    for key in SUMMARY_KEYS:
        text = str(payload.get(key) or "").strip()
        if text:
            return text.splitlines()[0][:60]
    return ""


def _group_label(group: dict[str, Any]) -> Text:
    style = style_for_group(group.get("style"))
    marker = "▸" if group.get("isCollapsed") else "▾"
    return Text.assemble(
        (f"{marker} ", style),
        (str(group.get("title", "")), style),
        (f"  [{len(group.get('steps', []))} steps]", "dim"),
        (f"  {group.get('id', '')}", "sd.id"),
    )


def _step_label(index: int, step: dict[str, Any]) -> Text:
    step_type = str(step.get("type", ""))
    return Text.assemble(
        (f"{index}. ", "dim"),
        (f"[{STEP_ICONS.get(step_type, '?')}] ", "sd.step"),
        (step_type, "sd.step"),
        (f"  {step.get('id', '')}", "sd.id"),
        (f"  {_step_summary(step)}", "dim"),
    )


def _document_tree(snapshot: dict[str, Any]) -> Tree:
    groups = snapshot.get("groups", [])
    tree = Tree(Text(f"Document ({len(groups)} groups)", style="sd.title"))
    for group in groups:
        branch = tree.add(_group_label(group))
        if group.get("isCollapsed"):
            continue
        for index, step in enumerate(group.get("steps", [])):
            branch.add(_step_label(index, step))
    return tree


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    console.print(
        Text.assemble(
            ("ERROR", "sd.error"),
            (f"  {result.op}", "sd.op"),
            f" — {err.message if err else 'Unknown error'}",
        )
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


def _render_mutation(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key in MUTATION_FIELDS:
        if key in result.data:
            _field(console, key, result.data[key])


def _render_document(result: ServiceResult, console: Console) -> None:
    console.print(_document_tree(result.data.get("document", {})))


def _render_group_table(result: ServiceResult, console: Console) -> None:
    table = Table(show_header=True, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="sd.id", no_wrap=True)
    table.add_column("Title", style="sd.title")
    table.add_column("Style")
    table.add_column("Steps", justify="right")
    table.add_column("Collapsed")
    for item in result.data.get("items", []):
        style = str(item.get("style", "default"))
        table.add_row(
            str(item.get("index", "")),
            str(item.get("id", "")),
            str(item.get("title", "")),
            Text(style, style=style_for_group(style)),
            str(item.get("step_count", 0)),
            "yes" if item.get("isCollapsed") else "no",
        )
    console.print(table)


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if key != "document":
            _field(console, key, value)


_MUTATION_OPS = (
    "add_group",
    "update_group",
    "toggle_collapse",
    "delete_group",
    "move_group",
    "add_step",
    "update_step",
    "delete_step",
    "copy_step",
    "move_step",
    "apply_drop",
)

_OP_RENDERERS: dict[str, Renderer] = {
    **dict.fromkeys(_MUTATION_OPS, _render_mutation),
    "get_document": _render_document,
    "list_groups": _render_group_table,
}
