from __future__ import annotations

import json
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml", ".toml")


def read_document(path: Path) -> Any | None:
    """
    按后缀读取 .json / .yaml / .yml / .toml 文件；后缀不支持时返回 None。
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        return None
    text = path.read_text(encoding="utf-8")
    if suffix == ".json":
        return json.loads(text)
    if suffix == ".toml":
        return tomllib.loads(text)

    import yaml

    return yaml.safe_load(text) or {}
