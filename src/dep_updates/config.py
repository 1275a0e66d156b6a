from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dep_updates.documents import read_document
from dep_updates.models import OUTPUT_FORMATS, REVISION_LEVELS, OutputFormat, RevisionLevel


@dataclass(frozen=True, slots=True)
class AppConfig:
    """
    dep-updates 的运行配置（可来自配置文件、环境变量与 CLI 参数合并）。
    """

    revision: RevisionLevel = "milestone"
    output_formatters: tuple[OutputFormat, ...] = ("plain",)
    output_dir: str = "build/dependencyUpdates"
    report_name: str = "report"
    verbose: bool = False


def _find_default_config_file(cwd: Path) -> Path | None:
    """
    在当前目录查找默认配置文件路径。
    """
    candidates = [
        ".dep-updates.toml",
        ".dep-updates.yaml",
        ".dep-updates.yml",
        "dep-updates.toml",
        "dep-updates.yaml",
        "dep-updates.yml",
    ]
    for name in candidates:
        p = cwd / name
        if p.exists() and p.is_file():
            return p
    return None


def _load_config_file(path: Path) -> dict[str, Any]:
    """
    读取 .toml 或 .yaml 配置文件，返回配置字典（非字典内容视为空配置）。
    """
    data = read_document(path)
    return data if isinstance(data, dict) else {}


def _env_list(key: str) -> list[str]:
    """
    从环境变量读取列表（逗号分隔）。
    """
    value = os.environ.get(key)
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def normalize_formatters(names: list[str] | tuple[str, ...]) -> tuple[OutputFormat, ...]:
    """
    过滤未知格式并去重（保持顺序）；结果为空时回退为 plain。
    """
    result: list[OutputFormat] = []
    for name in names:
        n = str(name).strip().lower()
        if n in OUTPUT_FORMATS and n not in result:
            result.append(n)
    return tuple(result) or ("plain",)


def normalize_revision(value: str | None) -> RevisionLevel:
    """
    非法的修订级别回退为 milestone。
    """
    v = str(value or "").strip().lower()
    return v if v in REVISION_LEVELS else "milestone"


def load_config(config_path: str | None) -> AppConfig:
    """
    从配置文件与环境变量加载 AppConfig。
    """
    config_data: dict[str, Any] = {}
    if config_path:
        config_data = _load_config_file(Path(config_path))
    else:
        default = _find_default_config_file(Path.cwd())
        if default:
            config_data = _load_config_file(default)

    tool_cfg = config_data.get("dep_updates") if isinstance(config_data, dict) else {}
    if not isinstance(tool_cfg, dict):
        tool_cfg = {}

    revision = os.environ.get("DEP_UPDATES_REVISION") or str(tool_cfg.get("revision") or "")

    formatters_cfg = tool_cfg.get("output_formatter") or []
    if isinstance(formatters_cfg, str):
        formatters_cfg = [v for v in formatters_cfg.split(",") if v.strip()]
    formatters = _env_list("DEP_UPDATES_OUTPUT_FORMATTER") or list(formatters_cfg)

    output_dir = (
        os.environ.get("DEP_UPDATES_OUTPUT_DIR")
        or str(tool_cfg.get("output_dir") or "")
        or "build/dependencyUpdates"
    )
    report_name = os.environ.get("DEP_UPDATES_REPORT_NAME") or str(tool_cfg.get("report_name") or "") or "report"
    verbose = bool(tool_cfg.get("verbose") or False)

    return AppConfig(
        revision=normalize_revision(revision),
        output_formatters=normalize_formatters(formatters),
        output_dir=output_dir,
        report_name=report_name,
        verbose=verbose,
    )
