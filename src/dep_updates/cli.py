from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from dep_updates.config import AppConfig, load_config, normalize_formatters, normalize_revision
from dep_updates.models import OUTPUT_FORMATS, REVISION_LEVELS


def build_parser() -> argparse.ArgumentParser:
    """
    构建 dep-updates 的命令行参数解析器。
    """
    parser = argparse.ArgumentParser(prog="dep-updates")
    parser.add_argument(
        "--version",
        action="store_true",
        help="输出版本号并退出",
    )
    parser.add_argument("--config", help="配置文件路径（.toml 或 .yaml）")
    parser.add_argument(
        "-v",
        "--verbose",
        "--info",
        dest="verbose",
        action="store_true",
        help="输出 INFO 级别日志（包含未解析依赖的失败原因）",
    )

    subparsers = parser.add_subparsers(dest="command")

    report = subparsers.add_parser("report", help="根据解析结果文件输出依赖更新报告")
    report.add_argument("results", help="外部解析器产出的结果文件（.json / .yaml / .toml）")
    report.add_argument("--revision", choices=list(REVISION_LEVELS), help="修订级别（覆盖结果文件与配置）")
    report.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=list(OUTPUT_FORMATS),
        default=[],
        help="输出格式（可重复）",
    )
    report.add_argument("--output-dir", help="报告输出目录")
    report.add_argument("--report-name", help="报告文件名（不含后缀）")

    return parser


def _merge_cli_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    将 CLI 参数覆盖合并到 AppConfig。
    """
    formats = getattr(args, "formats", None) or []
    output_dir = getattr(args, "output_dir", None)
    report_name = getattr(args, "report_name", None)
    revision = getattr(args, "revision", None)
    return replace(
        cfg,
        revision=normalize_revision(revision) if revision else cfg.revision,
        output_formatters=normalize_formatters(formats) if formats else cfg.output_formatters,
        output_dir=output_dir or cfg.output_dir,
        report_name=report_name or cfg.report_name,
        verbose=cfg.verbose or bool(args.verbose),
    )


def _configure_logging(verbose: bool) -> None:
    """
    通过 rich 将日志输出到 stderr。
    """
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def main(argv: list[str] | None = None) -> int:
    """
    dep-updates 命令行入口。
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from dep_updates import __version__

        print(__version__)
        return 0

    if args.command is None:
        parser.print_usage(sys.stderr)
        print("dep-updates: 缺少子命令。", file=sys.stderr)
        return 2

    try:
        cfg = _merge_cli_overrides(load_config(args.config), args)
    except Exception as exc:
        print(f"dep-updates: 读取配置失败：{exc}", file=sys.stderr)
        return 1
    _configure_logging(cfg.verbose)

    if args.command == "report":
        from dep_updates.app import run_report

        try:
            run_report(Path(args.results), config=cfg, revision=args.revision)
        except Exception as exc:
            print(f"dep-updates: 生成报告失败：{exc}", file=sys.stderr)
            return 1
        return 0

    print(f"dep-updates: 未知子命令 {args.command!r}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
