from __future__ import annotations

import io
import json

from dep_updates.formatters import print_table, render_json, render_markdown, report_to_json_obj
from dep_updates.models import DependencyKey, ModuleSelector, UnresolvedEntry
from dep_updates.report import ReportInput

LIB = DependencyKey("org", "lib")
OTHER = DependencyKey("org", "other")
SNAP = DependencyKey("com", "snap")


def _make_report() -> ReportInput:
    """
    构造一份用于 formatter 测试的最小报告。
    """
    return ReportInput(
        project_label=":app",
        revision_label="release",
        current_versions={LIB: "1.0", OTHER: "2.0", SNAP: "2.0-SNAPSHOT"},
        up_to_date_versions={LIB: "1.0"},
        downgrade_versions={SNAP: "1.9"},
        upgrade_versions={OTHER: "3.0"},
        unresolved=(UnresolvedEntry(ModuleSelector("org", "gone", "0.1"), ValueError("not found")),),
    )


def test_report_to_json_obj_groups_sections_with_counts() -> None:
    """
    JSON 对象按分类组织，并包含数量与可用版本/失败原因。
    """
    obj = report_to_json_obj(_make_report())
    assert obj["project"] == ":app"
    assert obj["revision"] == "release"
    assert obj["count"] == 4
    assert obj["current"] == {"count": 1, "dependencies": [{"group": "org", "name": "lib", "version": "1.0"}]}
    assert obj["exceeded"]["dependencies"] == [
        {"group": "com", "name": "snap", "version": "2.0-SNAPSHOT", "available": "1.9"}
    ]
    assert obj["outdated"]["dependencies"] == [{"group": "org", "name": "other", "version": "2.0", "available": "3.0"}]
    assert obj["unresolved"]["dependencies"] == [
        {"group": "org", "name": "gone", "version": "0.1", "reason": "not found"}
    ]


def test_render_json_is_valid_json() -> None:
    """
    render_json 的输出可被 json 解析回同一结构。
    """
    report = _make_report()
    assert json.loads(render_json(report)) == report_to_json_obj(report)


def test_render_markdown_contains_stats_and_table_rows() -> None:
    """
    Markdown 渲染应包含统计信息与各分类的表格行。
    """
    md = render_markdown(_make_report())
    assert "# :app Project Dependency Updates" in md
    assert "- 修订级别：`release`" in md
    assert "- 依赖总数：4" in md
    assert "| 依赖 | 当前 | 可用 | 状态 |" in md
    assert "| org:lib | 1.0 | 1.0 | up-to-date |" in md
    assert "| com:snap | 2.0-SNAPSHOT | 1.9 | exceeded |" in md
    assert "| org:other | 2.0 | 3.0 | outdated |" in md
    assert "| org:gone | 0.1 | - | unresolved |" in md


def test_print_table_writes_rows_and_summary() -> None:
    """
    rich 表格输出应包含依赖标签与汇总行。
    """
    buf = io.StringIO()
    print_table(_make_report(), file=buf)
    out = buf.getvalue()
    assert "org:other" in out
    assert "outdated" in out
    assert "可升级：1" in out
    assert "未解析：1" in out
