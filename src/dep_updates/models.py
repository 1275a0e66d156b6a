from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, Protocol, Union


@dataclass(frozen=True, slots=True, order=True)
class DependencyKey:
    """
    依赖的身份标识（group, name），不含版本；按 group、name 字典序排序。
    """

    group: str
    name: str

    @property
    def label(self) -> str:
        """
        渲染为 group:name 形式的标签。
        """
        return f"{self.group}:{self.name}"

    @classmethod
    def parse(cls, text: str) -> DependencyKey:
        """
        从 group:name 字符串解析依赖键。
        """
        group, sep, name = text.partition(":")
        if not sep or not group or not name:
            raise ValueError(f"invalid dependency key: {text!r}")
        return cls(group=group, name=name)


class HasCoordinates(Protocol):
    group: str
    name: str


@dataclass(frozen=True, slots=True)
class ModuleSelector:
    """
    外部解析器尝试解析的依赖坐标。
    """

    group: str
    name: str
    version: str | None = None


def key_of(selector: HasCoordinates) -> DependencyKey:
    """
    从任意带 group/name 属性的对象派生依赖键。
    """
    return DependencyKey(group=selector.group, name=selector.name)


Problem = Union[BaseException, str]


@dataclass(frozen=True, slots=True)
class UnresolvedEntry:
    """
    无法确定最新版本的依赖及其失败原因。
    """

    selector: ModuleSelector
    problem: Problem

    @property
    def key(self) -> DependencyKey:
        return key_of(self.selector)


VersionMapping = Mapping[DependencyKey, str]

RevisionLevel = Literal["release", "milestone", "integration"]
OutputFormat = Literal["plain", "json", "md", "table"]

REVISION_LEVELS: tuple[str, ...] = ("release", "milestone", "integration")
OUTPUT_FORMATS: tuple[str, ...] = ("plain", "json", "md", "table")


def sorted_items(versions: VersionMapping) -> list[tuple[DependencyKey, str]]:
    """
    按依赖键排序后返回 (key, version) 列表。
    """
    return sorted(versions.items(), key=lambda kv: kv[0])
