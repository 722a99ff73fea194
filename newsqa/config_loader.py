"""
Load ``newsqa/config/selectors.yaml`` with optional env overrides.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SELECTORS_PATH = Path(__file__).resolve().parent / "config" / "selectors.yaml"
REQUIRED_SECTIONS = ("listing", "navigation", "search")


def load_selectors(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the selector map. ``NEWSQA_SELECTORS_PATH`` points at an alternative
    file; values written as ``${VAR}`` are replaced from the environment.
    """
    env_path = os.getenv("NEWSQA_SELECTORS_PATH")
    config_path = path or (Path(env_path) if env_path else DEFAULT_SELECTORS_PATH)
    if not config_path.exists():
        raise FileNotFoundError(f"selectors file not found at {config_path}")
    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    missing = [section for section in REQUIRED_SECTIONS if section not in data]
    if missing:
        raise ValueError(f"selectors file {config_path} is missing sections: {', '.join(missing)}")
    logger.debug("Loaded selectors from %s", config_path)
    return _expand_env(data)


def _expand_env(data: Dict[str, Any]) -> Dict[str, Any]:
    def replace(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_key = value[2:-1]
            return os.getenv(env_key, "")
        if isinstance(value, dict):
            return {k: replace(v) for k, v in value.items()}
        if isinstance(value, list):
            return [replace(item) for item in value]
        return value

    return replace(data)  # type: ignore[return-value]
