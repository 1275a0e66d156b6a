from __future__ import annotations

import io
import sys
import threading
from pathlib import Path
from typing import ContextManager, TextIO

from dep_updates.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from dep_updates.models import sorted_items
from dep_updates.report import ReportInput

SEPARATOR = "-" * 60

_DEFAULT_LOCK = threading.Lock()


def default_lock() -> threading.Lock:
    """
    返回进程内共享的报告输出锁。
    """
    return _DEFAULT_LOCK


class DependencyUpdatesReporter:
    """
    将依赖更新检查结果写成纯文本报告。

    一次 write_to 调用在持有锁期间写完整份报告，多个线程并发写同一输出流时
    各自的报告保持为连续的文本块。默认所有实例共享同一把进程级锁，可通过
    lock 参数注入独立的锁。
    """

    def __init__(
        self,
        report: ReportInput,
        *,
        lock: ContextManager[object] | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self._report = report
        self._lock = lock if lock is not None else default_lock()
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnosticsSink()

    def write_to_console(self) -> None:
        """
        写到标准输出。
        """
        self.write_to(sys.stdout)

    def write_to_file(self, path: str | Path) -> None:
        """
        写到文件（UTF-8），无论成功与否都会关闭文件。
        """
        with open(path, "w", encoding="utf-8") as f:
            self.write_to(f)

    def render(self) -> str:
        """
        渲染为字符串。
        """
        buf = io.StringIO()
        self.write_to(buf)
        return buf.getvalue()

    def write_to(self, stream: TextIO) -> None:
        """
        写到给定的文本流；不会关闭该流。
        """
        with self._lock:
            self._write_header(stream)
            self._write_up_to_date(stream)
            self._write_exceed_latest_found(stream)
            self._write_upgrades(stream)
            self._write_unresolved(stream)

    def _write_header(self, stream: TextIO) -> None:
        print("", file=stream)
        print(SEPARATOR, file=stream)
        print(f"{self._report.project_label} Project Dependency Updates", file=stream)
        print(SEPARATOR, file=stream)

    def _write_up_to_date(self, stream: TextIO) -> None:
        versions = self._report.up_to_date_versions
        # Printed when nothing is at the latest version.
        if not versions:
            print("\nAll dependencies have later versions.", file=stream)
            return
        print(
            f"\nThe following dependencies are using the latest {self._report.revision_label} version:",
            file=stream,
        )
        for key, version in sorted_items(versions):
            print(f" - {key.label}:{version}", file=stream)

    def _write_exceed_latest_found(self, stream: TextIO) -> None:
        versions = self._report.downgrade_versions
        if not versions:
            return
        print(
            "\nThe following dependencies exceed the version found at the "
            f"{self._report.revision_label} revision level:",
            file=stream,
        )
        for key, version in sorted_items(versions):
            current = self._report.current_versions[key]
            print(f" - {key.label} [{current} <- {version}]", file=stream)

    def _write_upgrades(self, stream: TextIO) -> None:
        versions = self._report.upgrade_versions
        if not versions:
            print(f"\nAll dependencies are using the latest {self._report.revision_label} versions.", file=stream)
            return
        print(f"\nThe following dependencies have later {self._report.revision_label} versions:", file=stream)
        for key, version in sorted_items(versions):
            current = self._report.current_versions[key]
            print(f" - {key.label} [{current} -> {version}]", file=stream)

    def _write_unresolved(self, stream: TextIO) -> None:
        if not self._report.unresolved:
            return
        print(
            "\nFailed to determine the latest version for the following dependencies "
            "(use --info for details):",
            file=stream,
        )
        for entry in self._report.sorted_unresolved():
            print(f" - {entry.key.label}", file=stream)
            self._diagnostics.record(entry.key, entry.problem)
