"""Configuration loading from environment variables and ~/.jinfo/config.json.

The config is loaded once per process by the caller and passed explicitly to
whatever needs it; there is no module-level cache.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinfo.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1.0.0"
_DEFAULT_CONFIG_DIR = Path.home() / ".jinfo"
_CONFIG_FILENAME = "config.json"


@dataclass
class MemoType:
    """A semantic category recorded inline in a stored memo line."""

    key: str
    label: str
    description: str = ""
    emoji: str = ""
    color: str = "gray"


DEFAULT_MEMO_TYPES: list[MemoType] = [
    MemoType("note", "Note", "General notes and records", "📝", "gray"),
    MemoType("task", "Task", "Things to do and work items", "✅", "blue"),
    MemoType("idea", "Idea", "New ideas and inspiration", "💡", "yellow"),
    MemoType("meeting", "Meeting", "Meeting minutes and discussion", "🤝", "purple"),
    MemoType("learning", "Learning", "Things learned and insights", "📚", "green"),
    MemoType("issue", "Issue", "Problems to be solved", "⚠️", "red"),
    MemoType("progress", "Progress", "Work progress and status reports", "📈", "cyan"),
    MemoType("reflection", "Reflection", "Retrospectives and summaries", "🤔", "magenta"),
    MemoType("decision", "Decision", "Decisions and policies", "⚡", "orange"),
    MemoType("reference", "Reference", "Reference material and links", "🔗", "teal"),
]


@dataclass
class ProjectConfig:
    """A named directory of day-files."""

    path: str
    description: str = ""

    @property
    def base_path(self) -> Path:
        return Path(self.path).expanduser()


@dataclass
class ColorScheme:
    success: str = "green"
    error: str = "red"
    info: str = "blue"
    warning: str = "yellow"


@dataclass
class Preferences:
    date_format: str = "YYYY-MM-DD"
    time_format: str = "HH:mm:ss"
    default_tags: list[str] = field(default_factory=list)
    color_scheme: ColorScheme = field(default_factory=ColorScheme)


@dataclass
class Config:
    """Top-level jinfo configuration."""

    version: str = CONFIG_VERSION
    default_project: str = "default"
    projects: dict[str, ProjectConfig] = field(default_factory=dict)
    preferences: Preferences = field(default_factory=Preferences)
    memo_types: list[MemoType] = field(default_factory=lambda: list(DEFAULT_MEMO_TYPES))
    config_path: Path | None = field(default=None, repr=False, compare=False)

    def get_project(self, name: str | None = None) -> ProjectConfig:
        """Return the named project, or the default one."""
        project_name = name or self.default_project
        try:
            return self.projects[project_name]
        except KeyError:
            raise NotFoundError(f"Project '{project_name}' not found") from None

    def get_memo_type(self, key: str) -> MemoType | None:
        for memo_type in self.memo_types:
            if memo_type.key == key:
                return memo_type
        return None

    def to_dict(self) -> dict[str, Any]:
        prefs = self.preferences
        return {
            "version": self.version,
            "defaultProject": self.default_project,
            "projects": {
                name: {"path": p.path, "description": p.description}
                for name, p in self.projects.items()
            },
            "preferences": {
                "dateFormat": prefs.date_format,
                "timeFormat": prefs.time_format,
                "defaultTags": list(prefs.default_tags),
                "colorScheme": {
                    "success": prefs.color_scheme.success,
                    "error": prefs.color_scheme.error,
                    "info": prefs.color_scheme.info,
                    "warning": prefs.color_scheme.warning,
                },
            },
            "memoTypes": [
                {
                    "key": t.key,
                    "label": t.label,
                    "description": t.description,
                    "emoji": t.emoji,
                    "color": t.color,
                }
                for t in self.memo_types
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        prefs_data = data.get("preferences", {})
        colors_data = prefs_data.get("colorScheme", {})
        types_data = data.get("memoTypes")
        return cls(
            version=data.get("version", CONFIG_VERSION),
            default_project=data.get("defaultProject", "default"),
            projects={
                name: ProjectConfig(path=p["path"], description=p.get("description", ""))
                for name, p in data.get("projects", {}).items()
            },
            preferences=Preferences(
                date_format=prefs_data.get("dateFormat", "YYYY-MM-DD"),
                time_format=prefs_data.get("timeFormat", "HH:mm:ss"),
                default_tags=list(prefs_data.get("defaultTags", [])),
                color_scheme=ColorScheme(
                    success=colors_data.get("success", "green"),
                    error=colors_data.get("error", "red"),
                    info=colors_data.get("info", "blue"),
                    warning=colors_data.get("warning", "yellow"),
                ),
            ),
            # An absent memoTypes list falls back to the built-in types
            memo_types=(
                [MemoType(**t) for t in types_data]
                if types_data
                else list(DEFAULT_MEMO_TYPES)
            ),
        )


def default_config_path() -> Path:
    return Path(os.getenv("JINFO_CONFIG", str(_DEFAULT_CONFIG_DIR / _CONFIG_FILENAME)))


def default_config() -> Config:
    """Config written on first run."""
    return Config(
        projects={
            "default": ProjectConfig(
                path=str(Path.home() / "Documents" / "jinfo" / "default"),
                description="Default project",
            )
        },
    )


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Write the config back as pretty-printed JSON."""
    path = config_path or config.config_path or default_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(config.to_dict(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError:
        logger.error("Failed to save config to %s", path)
        raise
    config.config_path = path
    logger.debug("Saved config to %s", path)


def _bootstrap(path: Path) -> None:
    """Create the default config file and its project directories."""
    config = default_config()
    save_config(config, path)
    for project in config.projects.values():
        project.base_path.mkdir(parents=True, exist_ok=True)
    logger.info("Created initial config at %s", path)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration, creating it with defaults on first run.

    The file location comes from JINFO_CONFIG when set, else ~/.jinfo/config.json.
    Keys missing from the file fall back to defaults.
    """
    path = config_path or default_config_path()
    if not path.exists():
        _bootstrap(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.error("Failed to read config from %s", path)
        raise

    config = Config.from_dict(data)
    config.config_path = path
    return config


def add_project(
    config: Config, name: str, path: str, description: str | None = None
) -> ProjectConfig:
    """Register a new project, create its directory and persist the config."""
    if name in config.projects:
        raise ValidationError(f"Project '{name}' already exists")

    project = ProjectConfig(path=path, description=description or f"{name} project")
    project.base_path.mkdir(parents=True, exist_ok=True)
    config.projects[name] = project
    save_config(config)
    logger.info("Added project %s at %s", name, path)
    return project


def set_default_project(config: Config, name: str) -> None:
    if name not in config.projects:
        raise NotFoundError(f"Project '{name}' not found")
    config.default_project = name
    save_config(config)
    logger.info("Default project set to %s", name)
