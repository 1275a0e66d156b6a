from __future__ import annotations

import logging
from typing import Protocol

from dep_updates.models import DependencyKey, Problem

logger = logging.getLogger(__name__)


class DiagnosticsSink(Protocol):
    """
    报告正文之外的诊断旁路：接收未解析依赖的失败原因。
    """

    def record(self, key: DependencyKey, cause: Problem) -> None: ...


class LoggingDiagnosticsSink:
    """
    以 INFO 级别把失败原因写入 logging（异常通过 exc_info 附带堆栈）。
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record(self, key: DependencyKey, cause: Problem) -> None:
        if isinstance(cause, BaseException):
            self._log.info(
                "The exception that is the cause of unresolved state for %s:",
                key.label,
                exc_info=cause,
            )
        else:
            self._log.info("The cause of unresolved state for %s: %s", key.label, cause)
