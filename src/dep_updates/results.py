from __future__ import annotations

from pathlib import Path
from typing import Any

from dep_updates.documents import read_document
from dep_updates.models import DependencyKey, ModuleSelector, UnresolvedEntry
from dep_updates.report import ReportInput

DEFAULT_REVISION = "milestone"


class ResultsFileError(ValueError):
    """
    结果文件格式不正确。
    """


def load_results_data(path: Path) -> dict[str, Any]:
    """
    按后缀读取 .json / .yaml / .yml / .toml 结果文件，返回数据字典。
    """
    data = read_document(path)
    if data is None:
        raise ResultsFileError(f"unsupported results file type: {path.name}")
    if not isinstance(data, dict):
        raise ResultsFileError(f"{path.name}: top level must be a mapping")
    return data


def _parse_versions(data: dict[str, Any], field: str) -> dict[DependencyKey, str]:
    """
    将 {"group:name": "version"} 转换为以 DependencyKey 为键的映射。
    """
    raw = data.get(field) or {}
    if not isinstance(raw, dict):
        raise ResultsFileError(f"{field!r} must be a mapping of 'group:name' to version")
    versions: dict[DependencyKey, str] = {}
    for label, version in raw.items():
        try:
            key = DependencyKey.parse(str(label))
        except ValueError as exc:
            raise ResultsFileError(f"{field!r}: {exc}") from exc
        if not isinstance(version, str):
            raise ResultsFileError(f"{field!r}: version of {key.label} must be a string, got {version!r}")
        versions[key] = version
    return versions


def _parse_unresolved(data: dict[str, Any]) -> list[UnresolvedEntry]:
    """
    解析未解析依赖列表（每项包含 group/name，可选 version/reason）。
    """
    raw = data.get("unresolved") or []
    if not isinstance(raw, list):
        raise ResultsFileError("'unresolved' must be a list")
    entries: list[UnresolvedEntry] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("group") or not item.get("name"):
            raise ResultsFileError(f"unresolved entry needs 'group' and 'name': {item!r}")
        version = item.get("version")
        if version is not None and not isinstance(version, str):
            raise ResultsFileError(f"unresolved entry version must be a string: {item!r}")
        selector = ModuleSelector(
            group=str(item["group"]),
            name=str(item["name"]),
            version=version,
        )
        entries.append(UnresolvedEntry(selector=selector, problem=str(item.get("reason") or "unknown")))
    return entries


def parse_results(
    data: dict[str, Any],
    *,
    default_project: str,
    revision: str | None = None,
    default_revision: str = DEFAULT_REVISION,
) -> ReportInput:
    """
    从结果数据字典构造 ReportInput。
    """
    return ReportInput(
        project_label=str(data.get("project") or default_project),
        revision_label=revision or str(data.get("revision") or default_revision),
        current_versions=_parse_versions(data, "current"),
        up_to_date_versions=_parse_versions(data, "up_to_date"),
        downgrade_versions=_parse_versions(data, "exceeded"),
        upgrade_versions=_parse_versions(data, "outdated"),
        unresolved=tuple(_parse_unresolved(data)),
        latest_versions=_parse_versions(data, "latest"),
    )


def load_results(
    path: Path,
    *,
    revision: str | None = None,
    default_revision: str = DEFAULT_REVISION,
) -> ReportInput:
    """
    读取外部解析器产出的结果文件并构造 ReportInput。
    """
    data = load_results_data(path)
    default_project = path.resolve().parent.name or str(path)
    return parse_results(
        data,
        default_project=default_project,
        revision=revision,
        default_revision=default_revision,
    )
