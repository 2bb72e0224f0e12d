"""
codechat-render: build A2UI surfaces from a message list or a saved chat
history and print their render trees as JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from codechat.a2ui.catalog import STANDARD_CATALOG_ID
from codechat.a2ui.renderer import render_surface
from codechat.a2ui.surface_registry import Surface, SurfaceRegistry
from codechat.chat.transcript import ChatTranscript
from codechat.common.logger import setup_logging
from codechat.config.client_config import load_client_config
from codechat.util.file_utils import from_json_or_yaml

DEFAULT_SURFACE_ID = "surface"


def _looks_like_history(items: List[Any]) -> bool:
    return any(isinstance(item, dict) and "role" in item for item in items)


def _surface_payload(surface: Surface) -> Dict[str, Any]:
    tree = render_surface(surface)
    return {
        "surfaceId": surface.surface_id,
        "revision": surface.revision,
        "catalogId": surface.catalog_id,
        "interactive": surface.interactive,
        "rootId": surface.root_id,
        "dataModel": surface.data_model.snapshot(),
        "tree": tree.to_dict() if tree is not None else None,
    }


def build_render_report(
    document: Any,
    *,
    surface_id: str,
    tool_name: str,
    catalog_id: str = STANDARD_CATALOG_ID,
) -> Dict[str, Any]:
    """
    Render every surface described by ``document``.

    ``document`` is either a list of A2UI messages for one surface, a chat
    history list, or an object with a ``messages`` history list. Surfaces
    without a createSurface catalogId are reported under ``catalog_id``.
    """
    if isinstance(document, dict) and isinstance(document.get("messages"), list):
        document = document["messages"]
    if not isinstance(document, list):
        raise ValueError("Expected a list of A2UI messages or a chat history.")

    if _looks_like_history(document):
        transcript = ChatTranscript(SurfaceRegistry(catalog_id), tool_name=tool_name)
        transcript.load_history(document)
        surfaces = transcript.visible_surfaces()
        source = "history"
    else:
        registry = SurfaceRegistry(catalog_id)
        surface = registry.upsert(surface_id, document, interactive=False)
        surfaces = [surface] if surface is not None else []
        source = "messages"

    return {"source": source, "surfaces": [_surface_payload(surface) for surface in surfaces]}


@click.command(name="codechat-render")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--surface-id",
    "-s",
    default=DEFAULT_SURFACE_ID,
    show_default=True,
    help="Surface id used when the input is a bare message list.",
)
@click.option(
    "--config",
    "-c",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Optional client config (JSON/YAML).",
)
@click.option(
    "--output",
    "-o",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write the JSON report here instead of stdout.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def run(
    input_path: str,
    surface_id: str,
    config: Optional[str],
    output: Optional[str],
    verbose: bool,
) -> None:
    try:
        client_config = load_client_config(config)
    except Exception as exc:
        raise click.ClickException(f"Failed to load config: {exc}")

    setup_logging(log_file_path=client_config.log_file, verbose=verbose)
    if not verbose:
        logging.getLogger().setLevel(client_config.log_level_number)
    logger = logging.getLogger(__name__)

    try:
        document = from_json_or_yaml(Path(input_path))
        report = build_render_report(
            document,
            surface_id=surface_id,
            tool_name=client_config.render_tool_name,
            catalog_id=client_config.catalog_id,
        )
    except Exception as exc:
        logger.error("Failed to render %s: %s", input_path, exc)
        raise click.ClickException(str(exc))

    text = json.dumps(report, ensure_ascii=False, indent=2)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        click.echo(f"surfaces: {len(report['surfaces'])}")
    else:
        click.echo(text)


if __name__ == "__main__":
    run()
