"""Configuration loading for mdxdoc (.mdxdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import DeclarationKind

CONFIG_FILENAME = ".mdxdoc.yml"

# Mintlify renders at most four heading levels.
MAX_HEADING_LEVEL = 4

DEFAULT_FOLDERS: Dict[DeclarationKind, str] = {
    DeclarationKind.CLASS: "classes",
    DeclarationKind.INTERFACE: "interfaces",
    DeclarationKind.FUNCTION: "functions",
    DeclarationKind.ENUM: "enums",
    DeclarationKind.TYPE_ALIAS: "type-aliases",
    DeclarationKind.MODULE: "modules",
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RenderConfig:
    """Layout knobs consumed by the rendering core."""

    property_disclosure_threshold: int = 5
    method_disclosure_threshold: int = 3
    base_path: str = "api"
    index_page: str = "index"
    workers: int = 1
    templates_dir: Optional[Path] = None
    folders: Dict[DeclarationKind, str] = field(default_factory=lambda: dict(DEFAULT_FOLDERS))

    @property
    def max_heading_level(self) -> int:
        return MAX_HEADING_LEVEL

    @property
    def index_url(self) -> str:
        return "/" + "/".join(part for part in (self.base_path.strip("/"), self.index_page) if part)

    def folder_for(self, kind: DeclarationKind) -> str:
        return self.folders.get(kind) or DEFAULT_FOLDERS.get(kind, "modules")


@dataclass
class OutputConfig:
    """Where and how rendered pages are written."""

    directory: Optional[Path] = None
    extension: str = ".mdx"
    navigation: bool = True


@dataclass
class MdxDocConfig:
    """Represents the settings defined in .mdxdoc.yml."""

    root: Path
    project_name: Optional[str] = None
    render: RenderConfig = field(default_factory=RenderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Path) -> MdxDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MdxDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_name = _as_str(project_data.get("name")) if project_data else None

    render = RenderConfig()
    render_data = _as_dict(data.get("render"))
    if render_data:
        render.property_disclosure_threshold = _as_positive_int(
            render_data.get("property_disclosure_threshold"), render.property_disclosure_threshold
        )
        render.method_disclosure_threshold = _as_positive_int(
            render_data.get("method_disclosure_threshold"), render.method_disclosure_threshold
        )
        render.workers = _as_positive_int(render_data.get("workers"), render.workers)
        base_path = _as_str(render_data.get("base_path"))
        if base_path is not None:
            render.base_path = base_path.strip("/")
        index_page = _as_str(render_data.get("index_page"))
        if index_page:
            render.index_page = index_page.strip("/")
        templates_dir = _as_str(render_data.get("templates_dir"))
        if templates_dir:
            render.templates_dir = root / templates_dir
        render.folders.update(_parse_folders(render_data.get("folders")))

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        directory = _as_str(output_data.get("directory"))
        if directory:
            output.directory = root / directory
        extension = _as_str(output_data.get("extension"))
        if extension:
            output.extension = extension if extension.startswith(".") else f".{extension}"
        navigation = _as_bool(output_data.get("navigation"))
        if navigation is not None:
            output.navigation = navigation

    return MdxDocConfig(root=root, project_name=project_name, render=render, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _parse_folders(value: Any) -> Dict[DeclarationKind, str]:
    folders: Dict[DeclarationKind, str] = {}
    for key, folder in _as_dict(value).items():
        kind = DeclarationKind.from_name(str(key))
        name = _as_str(folder)
        if kind is DeclarationKind.UNKNOWN:
            raise ConfigError(f"Unknown declaration kind in render.folders: {key}")
        if name:
            folders[kind] = name.strip("/")
    return folders


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return default
        return parsed if parsed > 0 else default
    return default


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_FOLDERS",
    "MAX_HEADING_LEVEL",
    "MdxDocConfig",
    "OutputConfig",
    "RenderConfig",
    "load_config",
]
