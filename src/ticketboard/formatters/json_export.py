"""JSON export of the dashboard view-model."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..models.view import DashboardView


def view_to_json(view: DashboardView) -> str:
    return view.model_dump_json(by_alias=True, indent=2)


def export_view_json(view: DashboardView, output_path: Optional[Path] = None) -> str:
    """Serialize the view; also write it to ``output_path`` when given."""
    content = view_to_json(view)
    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    return content
