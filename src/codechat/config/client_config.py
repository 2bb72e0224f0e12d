from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from codechat.a2ui.catalog import STANDARD_CATALOG_ID
from codechat.a2ui.surface_registry import RENDER_UI_TOOL_NAME
from codechat.util.file_utils import from_json_or_yaml

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ClientConfig:
    catalog_id: str = STANDARD_CATALOG_ID
    render_tool_name: str = RENDER_UI_TOOL_NAME
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


def parse_client_config(config_dict: Mapping[str, Any]) -> ClientConfig:
    """
    Read the ``a2ui_config`` block (or a bare mapping) into a ClientConfig.

    Missing or invalid values keep their defaults.
    """
    if not isinstance(config_dict, Mapping):
        return ClientConfig()
    section = config_dict.get("a2ui_config")
    if not isinstance(section, Mapping):
        section = config_dict

    def _as_token(value: Any, default: str) -> str:
        token = str(value or "").strip()
        return token or default

    log_level = _as_token(section.get("log_level"), "INFO").upper()
    if log_level not in _LOG_LEVELS:
        log_level = "INFO"

    log_file = section.get("log_file")
    log_file = str(log_file).strip() if log_file else None

    return ClientConfig(
        catalog_id=_as_token(section.get("catalog_id"), STANDARD_CATALOG_ID),
        render_tool_name=_as_token(section.get("render_tool_name"), RENDER_UI_TOOL_NAME),
        log_level=log_level,
        log_file=log_file or None,
    )


def load_client_config(path: Optional[Union[str, Path]]) -> ClientConfig:
    if path is None:
        return ClientConfig()
    return parse_client_config(from_json_or_yaml(path))
