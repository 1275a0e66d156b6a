from __future__ import annotations

import json
from pathlib import Path

import pytest

from dep_updates.models import DependencyKey
from dep_updates.results import ResultsFileError, load_results

_DOC = {
    "project": ":app",
    "revision": "release",
    "current": {"org:lib": "1.0", "org:other": "2.0"},
    "latest": {"org:lib": "1.0", "org:other": "3.0"},
    "up_to_date": {"org:lib": "1.0"},
    "outdated": {"org:other": "3.0"},
    "unresolved": [{"group": "org", "name": "gone", "version": "0.1", "reason": "404"}],
}


def test_load_results_json(tmp_path: Path) -> None:
    """
    JSON 结果文件应被解析为 ReportInput。
    """
    path = tmp_path / "results.json"
    path.write_text(json.dumps(_DOC), encoding="utf-8")
    report = load_results(path)
    assert report.project_label == ":app"
    assert report.revision_label == "release"
    assert report.upgrade_versions == {DependencyKey("org", "other"): "3.0"}
    assert report.latest_versions[DependencyKey("org", "other")] == "3.0"
    assert report.downgrade_versions == {}
    entry = report.unresolved[0]
    assert entry.key == DependencyKey("org", "gone")
    assert entry.selector.version == "0.1"
    assert entry.problem == "404"


def test_load_results_yaml_and_revision_override(tmp_path: Path) -> None:
    """
    YAML 结果文件可读取；显式 revision 覆盖文件中的值。
    """
    path = tmp_path / "results.yaml"
    path.write_text(
        """
project: ":lib"
revision: release
current:
  "org:lib": "1.0"
up_to_date:
  "org:lib": "1.0"
        """.strip()
        + "\n",
        encoding="utf-8",
    )
    report = load_results(path, revision="integration")
    assert report.revision_label == "integration"
    assert report.up_to_date_versions == {DependencyKey("org", "lib"): "1.0"}


def test_load_results_toml_defaults(tmp_path: Path) -> None:
    """
    TOML 缺少 project/revision 时回退为所在目录名与默认修订级别。
    """
    project_dir = tmp_path / "demo"
    project_dir.mkdir()
    path = project_dir / "results.toml"
    path.write_text('[current]\n"org:lib" = "1.0"\n', encoding="utf-8")
    report = load_results(path, default_revision="release")
    assert report.project_label == "demo"
    assert report.revision_label == "release"


@pytest.mark.parametrize(
    "doc",
    [
        {"current": {"no-colon": "1"}},
        {"current": ["org:lib"]},
        {"unresolved": [{"group": "org"}]},
        {"unresolved": {"group": "org", "name": "x"}},
        {"current": {"org:lib": None}},
        {"current": {"org:lib": 1.5}},
        {"unresolved": [{"group": "org", "name": "x", "version": 2}]},
    ],
)
def test_load_results_rejects_malformed(doc: dict, tmp_path: Path) -> None:
    """
    结构不正确的结果文件应抛出 ResultsFileError。
    """
    path = tmp_path / "results.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(ResultsFileError):
        load_results(path)


def test_load_results_rejects_unknown_suffix_and_non_mapping(tmp_path: Path) -> None:
    """
    不支持的后缀或顶层非字典均应报错。
    """
    txt = tmp_path / "results.txt"
    txt.write_text("{}", encoding="utf-8")
    with pytest.raises(ResultsFileError):
        load_results(txt)

    lst = tmp_path / "results.json"
    lst.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ResultsFileError):
        load_results(lst)


def test_load_results_yaml_rejects_unquoted_version(tmp_path: Path) -> None:
    """
    YAML 中未加引号的版本号（如 1.10 会被解析为浮点数 1.1）应被拒绝，而不是被悄悄改写。
    """
    path = tmp_path / "results.yaml"
    path.write_text(
        """
current:
  "org:lib": 1.10
up_to_date:
  "org:lib": 1.10
        """.strip()
        + "\n",
        encoding="utf-8",
    )
    with pytest.raises(ResultsFileError, match="org:lib"):
        load_results(path)
