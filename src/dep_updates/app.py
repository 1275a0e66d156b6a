from __future__ import annotations

import logging
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import ContextManager, TextIO

from dep_updates.config import AppConfig
from dep_updates.diagnostics import DiagnosticsSink
from dep_updates.formatters import print_table, render_json, render_markdown
from dep_updates.report import ReportInput
from dep_updates.reporter import DependencyUpdatesReporter, default_lock
from dep_updates.results import load_results

logger = logging.getLogger(__name__)

_FILE_SUFFIXES = {"plain": ".txt", "json": ".json", "md": ".md"}


def report_path(config: AppConfig, formatter: str) -> Path:
    """
    返回某种输出格式对应的报告文件路径。
    """
    return Path(config.output_dir) / f"{config.report_name}{_FILE_SUFFIXES[formatter]}"


def write_reports(
    report: ReportInput,
    *,
    config: AppConfig,
    console_stream: TextIO | None = None,
    lock: ContextManager[object] | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> list[Path]:
    """
    按配置的输出格式依次输出报告，返回写入的文件路径。

    整个输出过程持有报告锁（默认为进程级共享锁），并发调用在共享控制台上
    的输出保持为连续的文本块。
    """
    stream = console_stream if console_stream is not None else sys.stdout
    # The outer lock is already held while rendering.
    reporter = DependencyUpdatesReporter(report, lock=nullcontext(), diagnostics=diagnostics)
    guard = lock if lock is not None else default_lock()
    written: list[Path] = []

    with guard:
        for formatter in config.output_formatters:
            if formatter == "table":
                print_table(report, file=stream)
                continue

            path = report_path(config, formatter)
            path.parent.mkdir(parents=True, exist_ok=True)
            if formatter == "plain":
                text = reporter.render()
                stream.write(text)
                path.write_text(text, encoding="utf-8")
            elif formatter == "json":
                path.write_text(render_json(report) + "\n", encoding="utf-8")
            elif formatter == "md":
                path.write_text(render_markdown(report), encoding="utf-8")
            else:
                raise ValueError(f"unknown output formatter: {formatter!r}")
            logger.info("已写入 %s 报告：%s", formatter, path)
            written.append(path)

    return written


def run_report(
    results_path: Path,
    *,
    config: AppConfig,
    revision: str | None = None,
    console_stream: TextIO | None = None,
) -> list[Path]:
    """
    读取结果文件并输出报告。
    """
    report = load_results(results_path, revision=revision, default_revision=config.revision)
    logger.info(
        "%s：共 %d 个依赖（修订级别 %s）",
        report.project_label,
        report.dependency_count,
        report.revision_label,
    )
    return write_reports(report, config=config, console_stream=console_stream)
