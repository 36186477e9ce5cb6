"""CLI for the mind map editor core (layout, search, check, replay)."""

import inspect
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from mindmap_editor.core.constraints import DEFAULT_CONSTRAINTS, TypeConstraintTable, find_violations
from mindmap_editor.core.state.options import EditorConfig, SchemaVariant
from mindmap_editor.core.tree.markdown import render_outline
from mindmap_editor.core.tree.normalize import normalize_tree, to_data
from mindmap_editor.core.tree.operations import iter_nodes
from mindmap_editor.editor import MindMapEditor
from mindmap_editor.logging_config import configure_logging
from mindmap_editor.models.node import Node

app = typer.Typer(help="Mind map editor: lay out, search and edit mind map trees.")

# Editor methods a replay script may call.
REPLAY_COMMANDS = frozenset(
    {
        "add",
        "add_sibling",
        "delete",
        "move",
        "update_text",
        "update_priority",
        "toggle_collapse",
        "collapse_all",
        "expand_all",
        "select",
        "edit",
        "set_viewport",
        "set_search_term",
        "next_match",
        "previous_match",
        "undo",
        "redo",
        "set_read_only",
        "replace_tree",
    }
)

VariantOption = Annotated[
    SchemaVariant,
    typer.Option("--variant", "-V", help="Node schema: minimal or extended"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _read_json(path: Path) -> Any:
    """Read a JSON file, exiting with an error message when that fails."""
    if not path.exists():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in {}: {}", path, e)
        raise typer.Exit(1) from e


def _load_editor(path: Path, variant: SchemaVariant) -> MindMapEditor:
    editor = MindMapEditor(EditorConfig(variant=variant))
    editor.load(_read_json(path))
    return editor


def _geometry(root: Node | None) -> list[dict[str, Any]]:
    return [
        {
            "id": node.id,
            "text": node.text,
            "x": node.position.x,
            "y": node.position.y,
            "width": node.width,
            "height": node.height,
            "collapsed": node.is_collapsed,
        }
        for node in iter_nodes(root, include_collapsed=False)
    ]


@app.command()
def layout(
    file: Path = typer.Argument(..., help="Tree JSON file"),
    variant: VariantOption = SchemaVariant.EXTENDED,
    output_json: JsonOption = False,
) -> None:
    """Lay out a tree and print every visible node's box."""
    editor = _load_editor(file, variant)
    nodes = _geometry(editor.root)

    if output_json:
        typer.echo(json.dumps({"nodes": nodes}, indent=2, ensure_ascii=False))
        return
    for n in nodes:
        typer.echo(
            f"{n['id']}  x={n['x']:.1f} y={n['y']:.1f} "
            f"w={n['width']:.1f} h={n['height']:.1f}  {n['text'][:60]}"
        )


@app.command()
def search(
    file: Path = typer.Argument(..., help="Tree JSON file"),
    term: str = typer.Argument(..., help="Text to look for (case-insensitive)"),
    variant: VariantOption = SchemaVariant.EXTENDED,
    output_json: JsonOption = False,
) -> None:
    """Print the nodes whose text contains TERM, in document order."""
    editor = _load_editor(file, variant)
    editor.set_search_term(term)
    search_state = editor.state.search

    if output_json:
        data = {"term": term, "matches": list(search_state.matches)}
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    typer.echo(f"Found {len(search_state.matches)} matches for {term!r}")
    for node in iter_nodes(editor.root):
        if node.id in search_state.highlighted:
            typer.echo(f"  {node.id}  {node.text[:80]}")


@app.command()
def check(
    file: Path = typer.Argument(..., help="Tree JSON file"),
    constraints: Annotated[
        Path | None,
        typer.Option("--constraints", "-c", help="Constraint table JSON file"),
    ] = None,
) -> None:
    """Report placements in a tree that the type constraint table forbids."""
    table = DEFAULT_CONSTRAINTS
    if constraints is not None:
        try:
            table = TypeConstraintTable.from_mapping(_read_json(constraints))
        except (ValueError, AttributeError) as e:
            logger.error("Invalid constraint table {}: {}", constraints, e)
            raise typer.Exit(1) from e

    problems = find_violations(table, normalize_tree(_read_json(file)))
    if not problems:
        typer.echo("No violations found.")
        return
    for problem in problems:
        typer.echo(problem)
    raise typer.Exit(1)


def _run_step(editor: MindMapEditor, index: int, raw_step: Any) -> str | None:
    """Run one replay step. Returns an error message when the step failed."""
    if not isinstance(raw_step, dict) or not isinstance(raw_step.get("command"), str):
        return f"step {index}: expected an object with a 'command' name"
    args = dict(raw_step)
    name = args.pop("command")
    if name not in REPLAY_COMMANDS:
        return f"step {index}: unknown command {name!r}"
    method = getattr(editor, name)
    try:
        inspect.signature(method).bind(**args)
    except TypeError as e:
        return f"step {index}: bad arguments for {name}: {e}"
    outcome = method(**args)
    if not outcome.success:
        return f"step {index}: {name} rejected: {outcome.error}"
    return None


@app.command()
def replay(
    file: Path = typer.Argument(..., help="Tree JSON file"),
    script: Path = typer.Argument(..., help="JSON list of editor commands"),
    variant: VariantOption = SchemaVariant.EXTENDED,
    output_json: JsonOption = False,
) -> None:
    """Apply a script of editor commands to a tree and print the result.

    SCRIPT holds a list like [{"command": "add", "text": "Idea", "parent_id": "root"}].
    Rejected steps are reported and skipped.
    """
    editor = _load_editor(file, variant)
    steps = _read_json(script)
    if not isinstance(steps, list):
        logger.error("Replay script must be a JSON list of commands: {}", script)
        raise typer.Exit(1)

    rejected: list[str] = []
    for index, raw_step in enumerate(steps):
        error = _run_step(editor, index, raw_step)
        if error is not None:
            logger.warning("{}", error)
            rejected.append(error)

    state = editor.state
    if output_json:
        data = {
            "tree": to_data(state.root) if state.root is not None else None,
            "selected": state.selected_node_id,
            "editing": state.editing_node_id,
            "rejected": rejected,
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    typer.echo(render_outline(state.root, badges=editor.config.badges()), nl=False)
    typer.echo(f"Applied {len(steps) - len(rejected)} of {len(steps)} steps")
