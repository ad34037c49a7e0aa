"""Configuration loading for blockdoc (.blockdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".blockdoc.yml"
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_STORE_PATH = Path(".blockdoc") / "store.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """LLM runtime settings from .blockdoc.yml."""

    runner: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: Optional[float] = None


@dataclass
class IntakeConfig:
    """File intake filters."""

    exclude_paths: List[str] = field(default_factory=list)
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


@dataclass
class SegmenterConfig:
    """Overrides for the segmenter's file recognition lists."""

    code_extensions: List[str] = field(default_factory=list)
    config_files: List[str] = field(default_factory=list)


@dataclass
class ExportConfig:
    """Default export selection and destination."""

    formats: List[str] = field(default_factory=list)
    diagrams: List[str] = field(default_factory=list)
    output_dir: Optional[Path] = None


@dataclass
class BlockDocConfig:
    """Represents the settings defined in .blockdoc.yml."""

    root: Path
    project_name: Optional[str] = None
    llm: Optional[LLMConfig] = None
    intake: IntakeConfig = field(default_factory=IntakeConfig)
    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    templates_dir: Optional[Path] = None
    store_path: Optional[Path] = None

    @property
    def resolved_store_path(self) -> Path:
        return self.store_path or (self.root / DEFAULT_STORE_PATH)


def load_config(config_path: Path) -> BlockDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BlockDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_name = _as_str(project_data.get("name")) if project_data else None

    llm_data = _as_dict(data.get("llm"))
    llm = None
    if llm_data:
        llm = LLMConfig(
            runner=_as_str(llm_data.get("runner")),
            model=_as_str(llm_data.get("model")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            base_url=_as_str(llm_data.get("base_url")),
            api_key=_as_str(llm_data.get("api_key")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
        )
        if not any(
            (
                llm.runner,
                llm.model,
                llm.temperature,
                llm.max_tokens,
                llm.base_url,
                llm.api_key,
                llm.request_timeout,
            )
        ):
            llm = None

    intake_data = _as_dict(data.get("intake"))
    intake = IntakeConfig()
    if intake_data:
        intake.exclude_paths = _as_str_list(intake_data.get("exclude_paths"))
        max_size = _as_int(intake_data.get("max_file_size"))
        if max_size is not None and max_size > 0:
            intake.max_file_size = max_size

    segmenter_data = _as_dict(data.get("segmenter"))
    segmenter = SegmenterConfig()
    if segmenter_data:
        segmenter.code_extensions = [
            ext.lstrip(".").lower()
            for ext in _as_str_list(segmenter_data.get("code_extensions"))
        ]
        segmenter.config_files = _as_str_list(segmenter_data.get("config_files"))

    prompting_data = _as_dict(data.get("prompting"))
    templates_dir_str = _as_str(prompting_data.get("templates_dir")) if prompting_data else None
    templates_dir = root / templates_dir_str if templates_dir_str else None

    export_data = _as_dict(data.get("export"))
    export = ExportConfig()
    if export_data:
        export.formats = _as_str_list(export_data.get("formats"))
        export.diagrams = _as_str_list(export_data.get("diagrams"))
        output_dir = _as_str(export_data.get("output_dir"))
        export.output_dir = root / output_dir if output_dir else None

    store_data = _as_dict(data.get("store"))
    store_path_str = _as_str(store_data.get("path")) if store_data else None
    store_path = root / store_path_str if store_path_str else None

    return BlockDocConfig(
        root=root,
        project_name=project_name,
        llm=llm,
        intake=intake,
        segmenter=segmenter,
        export=export,
        templates_dir=templates_dir,
        store_path=store_path,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
