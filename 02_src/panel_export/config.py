"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
RESOURCES_DIR = Path(__file__).resolve().parent / "resources"
DEFAULT_LAYOUT_PATH = RESOURCES_DIR / "dashboards" / "camel-jfr.json"
DEFAULT_REPORTS_DIR = "reports"


PathLike = Union[str, Path]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def resolve_path(env_value: PathLike | None, default: Path) -> Path:
    """Resolve a configured path, relative paths are taken from the project root."""
    if not env_value:
        return default

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass
class Settings:
    """Runtime settings, read from the environment by from_env()."""

    grafana_user: str = "admin"
    grafana_password: str = "admin"
    dashboard_title: str = "JFR Events"
    dashboard_slug: str = "jfr-events"
    org_id: int = 1
    render_width: int = 1000
    render_height: int = 500
    render_timezone: str = "Europe/Rome"
    connect_timeout: float = 20.0
    render_timeout: float = 120.0
    max_concurrency: int = 8
    strict_export: bool = True
    panel_layout_path: Path = DEFAULT_LAYOUT_PATH
    jfr_binary: str = "jfr"
    startup_timeout: float = 180.0

    # Pre-started services; when both are set no containers are started
    grafana_url: str | None = None
    jfr_datasource_url: str | None = None
    renderer_url: str | None = None

    jfr_datasource_image: str = "croway/jfr-datasource:2.1.0"
    grafana_image: str = "grafana/grafana"
    renderer_image: str = "grafana/grafana-image-renderer"

    @property
    def auth(self) -> tuple[str, str]:
        """Basic auth credentials for the visualization service."""
        return (self.grafana_user, self.grafana_password)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            grafana_user=os.getenv("GRAFANA_USER", defaults.grafana_user),
            grafana_password=os.getenv("GRAFANA_PASSWORD", defaults.grafana_password),
            dashboard_title=os.getenv("DASHBOARD_TITLE", defaults.dashboard_title),
            dashboard_slug=os.getenv("DASHBOARD_SLUG", defaults.dashboard_slug),
            org_id=_env_int("GRAFANA_ORG_ID", defaults.org_id),
            render_width=_env_int("RENDER_WIDTH", defaults.render_width),
            render_height=_env_int("RENDER_HEIGHT", defaults.render_height),
            render_timezone=os.getenv("RENDER_TIMEZONE", defaults.render_timezone),
            connect_timeout=_env_float("CONNECT_TIMEOUT", defaults.connect_timeout),
            render_timeout=_env_float("RENDER_TIMEOUT", defaults.render_timeout),
            max_concurrency=_env_int("MAX_CONCURRENCY", defaults.max_concurrency),
            strict_export=_env_bool("STRICT_EXPORT", defaults.strict_export),
            panel_layout_path=resolve_path(
                os.getenv("PANEL_LAYOUT_PATH"), defaults.panel_layout_path
            ),
            jfr_binary=os.getenv("JFR_BINARY", defaults.jfr_binary),
            startup_timeout=_env_float("STARTUP_TIMEOUT", defaults.startup_timeout),
            grafana_url=os.getenv("GRAFANA_URL") or None,
            jfr_datasource_url=os.getenv("JFR_DATASOURCE_URL") or None,
            renderer_url=os.getenv("RENDERER_URL") or None,
            jfr_datasource_image=os.getenv(
                "JFR_DATASOURCE_IMAGE", defaults.jfr_datasource_image
            ),
            grafana_image=os.getenv("GRAFANA_IMAGE", defaults.grafana_image),
            renderer_image=os.getenv("RENDERER_IMAGE", defaults.renderer_image),
        )
