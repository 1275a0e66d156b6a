from __future__ import annotations

import json
from typing import Any, TextIO

from rich.console import Console
from rich.table import Table

from dep_updates.models import DependencyKey, sorted_items
from dep_updates.report import ReportInput


def _entry(key: DependencyKey, version: str | None, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"group": key.group, "name": key.name, "version": version}
    data.update(extra)
    return data


def _section(dependencies: list[dict[str, Any]]) -> dict[str, Any]:
    return {"count": len(dependencies), "dependencies": dependencies}


def report_to_json_obj(report: ReportInput) -> dict[str, Any]:
    """
    将报告转换为可 JSON 序列化的字典结构（各分类按依赖键排序）。
    """
    current = [_entry(key, version) for key, version in sorted_items(report.up_to_date_versions)]
    exceeded = [
        _entry(key, report.current_versions[key], available=version)
        for key, version in sorted_items(report.downgrade_versions)
    ]
    outdated = [
        _entry(key, report.current_versions[key], available=version)
        for key, version in sorted_items(report.upgrade_versions)
    ]
    unresolved = [
        _entry(entry.key, entry.selector.version, reason=str(entry.problem)) for entry in report.sorted_unresolved()
    ]
    return {
        "project": report.project_label,
        "revision": report.revision_label,
        "count": report.dependency_count,
        "current": _section(current),
        "exceeded": _section(exceeded),
        "outdated": _section(outdated),
        "unresolved": _section(unresolved),
    }


def render_json(report: ReportInput) -> str:
    """
    渲染 JSON 输出。
    """
    return json.dumps(report_to_json_obj(report), ensure_ascii=False, indent=2)


def _table_rows(report: ReportInput) -> list[tuple[str, str, str, str]]:
    """
    汇总各分类为 (依赖, 当前, 可用, 状态) 行。
    """
    rows: list[tuple[str, str, str, str]] = []
    for key, version in sorted_items(report.up_to_date_versions):
        rows.append((key.label, version, report.latest_versions.get(key, version), "up-to-date"))
    for key, version in sorted_items(report.downgrade_versions):
        rows.append((key.label, report.current_versions[key], version, "exceeded"))
    for key, version in sorted_items(report.upgrade_versions):
        rows.append((key.label, report.current_versions[key], version, "outdated"))
    for entry in report.sorted_unresolved():
        rows.append((entry.key.label, entry.selector.version or "-", "-", "unresolved"))
    return rows


def render_markdown(report: ReportInput) -> str:
    """
    渲染 Markdown 报告（表格 + 简要统计）。
    """
    lines: list[str] = []
    lines.append(
        f"# {report.project_label} Project Dependency Updates\n\n"
        f"- 修订级别：`{report.revision_label}`\n"
        f"- 依赖总数：{report.dependency_count}\n"
    )
    lines.append("| 依赖 | 当前 | 可用 | 状态 |")
    lines.append("|---|---|---|---|")
    for label, current, available, status in _table_rows(report):
        lines.append(f"| {label} | {current} | {available} | {status} |")
    return "\n".join(lines) + "\n"


def print_table(report: ReportInput, *, file: TextIO | None = None) -> None:
    """
    以控制台表格形式输出报告。
    """
    console = Console(file=file)
    table = Table(title=f"{report.project_label} Project Dependency Updates")
    table.add_column("依赖", no_wrap=True)
    table.add_column("当前", no_wrap=True)
    table.add_column("可用", no_wrap=True)
    table.add_column("状态", no_wrap=True)
    for row in _table_rows(report):
        table.add_row(*row)
    console.print(table)
    console.print(
        f"修订级别：{report.revision_label}，依赖总数：{report.dependency_count}，"
        f"可升级：{len(report.upgrade_versions)}，未解析：{len(report.unresolved)}"
    )
