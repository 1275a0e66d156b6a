from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from dep_updates.models import DependencyKey, UnresolvedEntry, VersionMapping


class ReportInputError(ValueError):
    """
    报告输入违反数据约定（缺少当前版本、分类集合重叠等）。
    """


def _freeze(versions: Mapping[DependencyKey, str] | None) -> VersionMapping:
    """
    复制为只读映射。
    """
    return MappingProxyType(dict(versions or {}))


@dataclass(frozen=True, slots=True)
class ReportInput:
    """
    一次依赖更新检查的分类结果快照（构造后不可变，只被渲染一次）。
    """

    project_label: str
    revision_label: str
    current_versions: VersionMapping
    up_to_date_versions: VersionMapping = field(default_factory=dict)
    downgrade_versions: VersionMapping = field(default_factory=dict)
    upgrade_versions: VersionMapping = field(default_factory=dict)
    unresolved: tuple[UnresolvedEntry, ...] = ()
    latest_versions: VersionMapping = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in (
            "current_versions",
            "up_to_date_versions",
            "downgrade_versions",
            "upgrade_versions",
            "latest_versions",
        ):
            object.__setattr__(self, name, _freeze(getattr(self, name)))
        object.__setattr__(self, "unresolved", tuple(self.unresolved))
        self._validate()

    def _validate(self) -> None:
        """
        检查分类集合互斥，且降级/升级条目都能查到当前版本。
        """
        seen: dict[DependencyKey, str] = {}
        categories = (
            ("up_to_date", self.up_to_date_versions),
            ("downgrade", self.downgrade_versions),
            ("upgrade", self.upgrade_versions),
        )
        for category, versions in categories:
            for key in versions:
                if key in seen:
                    raise ReportInputError(f"{key.label} appears in both {seen[key]} and {category}")
                seen[key] = category
                if key not in self.current_versions:
                    raise ReportInputError(f"{key.label} ({category}) has no current version")

    @property
    def dependency_count(self) -> int:
        """
        参与评估的不同依赖数量。
        """
        keys: set[DependencyKey] = set(self.up_to_date_versions)
        keys.update(self.downgrade_versions)
        keys.update(self.upgrade_versions)
        keys.update(entry.key for entry in self.unresolved)
        return len(keys)

    def sorted_unresolved(self) -> list[UnresolvedEntry]:
        """
        按 selector 派生的依赖键排序未解析条目。
        """
        return sorted(self.unresolved, key=lambda entry: entry.key)