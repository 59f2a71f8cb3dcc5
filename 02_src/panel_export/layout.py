"""Panel layout document loading."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import InputError
from .logging_config import get_logger
from .models import Panel

logger = get_logger(__name__)


class PanelEntry(BaseModel):
    """A panel in the dashboard JSON. Only the fields the exporter needs."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    type: str | None = None
    panels: list["PanelEntry"] = []


class PanelLayout(BaseModel):
    """Top level of the dashboard JSON."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    panels: list[PanelEntry]


def panels_from_layout(layout: PanelLayout) -> list[Panel]:
    """Flatten the layout into exportable panels; collapsed rows contribute their children."""
    panels: list[Panel] = []
    for entry in layout.panels:
        if entry.type == "row":
            panels.extend(Panel(id=child.id, title=child.title) for child in entry.panels)
        else:
            panels.append(Panel(id=entry.id, title=entry.title))
    return panels


def load_panel_layout(path: Path) -> list[Panel]:
    """
    Load the panels of a dashboard layout document.

    Raises:
        InputError: the file is missing, not JSON, or has no valid panels list.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InputError(f"cannot read panel layout {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"panel layout {path} is not valid JSON: {e}") from e

    try:
        layout = PanelLayout.model_validate(document)
    except ValidationError as e:
        raise InputError(f"invalid panel layout {path}: {e}") from e

    panels = panels_from_layout(layout)
    logger.info("Loaded %d panels from %s", len(panels), path.name)
    return panels
