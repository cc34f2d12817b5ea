"""Assertions, checks and verifications that log before breaking execution."""

from __future__ import annotations

import inspect
from typing import Any

from mauengine import services
from mauengine.logger import LogCategory, LogPriority

ENABLE_ASSERTS = True

_NO_MESSAGE = "NO MESSAGE SPECIFIED"


class AssertionFailure(AssertionError):
    """Raised when an assert, check or (with asserts enabled) verify fails."""

    def __init__(
        self,
        kind: str,
        category: LogCategory,
        expression: str,
        file: str,
        line: int,
        message: str | None,
    ) -> None:
        self.kind = kind
        self.category = category
        self.expression = expression
        self.file = file
        self.line = line
        self.message = message
        super().__init__(
            f"{kind} failed: {expression} File: {file}, Line: {line}, "
            f"Message: {message if message is not None else _NO_MESSAGE}"
        )


def _report(
    priority: LogPriority,
    kind: str,
    category: LogCategory,
    expression: str,
    file: str,
    line: int,
    message: str | None,
) -> None:
    services.get_logger().log(
        priority,
        category,
        kind + " failed: {} File: {}, Line: {}, Message: {}",
        expression,
        file,
        line,
        message if message is not None else _NO_MESSAGE,
    )


def internal_assert(
    category: LogCategory, expression: str, file: str, line: int, message: str | None = None
) -> None:
    """Log a failed assertion as fatal."""
    _report(LogPriority.FATAL, "Assertion", category, expression, file, line, message)


def internal_check(
    category: LogCategory, expression: str, file: str, line: int, message: str | None = None
) -> None:
    """Log a failed check as fatal."""
    _report(LogPriority.FATAL, "Check", category, expression, file, line, message)


def internal_verify(
    category: LogCategory, expression: str, file: str, line: int, message: str | None = None
) -> None:
    """Log a failed verification as a warning."""
    _report(LogPriority.WARN, "Verify", category, expression, file, line, message)


def _call_site() -> tuple[str, int, str]:
    """File, line and source text of the code that called the public assert function."""
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
        if caller is None:
            return "<unknown>", 0, "<expression>"
        info = inspect.getframeinfo(caller, context=1)
        text = info.code_context[0].strip() if info.code_context else "<expression>"
        return info.filename, info.lineno, text
    finally:
        del frame


def me_assert(expr: Any, message: str | None = None, category: LogCategory = LogCategory.GAME) -> None:
    """Fail loudly when ``expr`` is false; a no-op when asserts are disabled."""
    if not ENABLE_ASSERTS or expr:
        return
    file, line, text = _call_site()
    internal_assert(category, text, file, line, message)
    raise AssertionFailure("Assertion", category, text, file, line, message)


def me_check(expr: Any, message: str | None = None, category: LogCategory = LogCategory.GAME) -> None:
    """Fail loudly when ``expr`` is false, whether asserts are enabled or not."""
    if expr:
        return
    file, line, text = _call_site()
    internal_check(category, text, file, line, message)
    raise AssertionFailure("Check", category, text, file, line, message)


def me_verify(expr: Any, message: str | None = None, category: LogCategory = LogCategory.GAME) -> None:
    """Warn when ``expr`` is false; also raise when asserts are enabled."""
    if expr:
        return
    file, line, text = _call_site()
    internal_verify(category, text, file, line, message)
    if ENABLE_ASSERTS:
        raise AssertionFailure("Verify", category, text, file, line, message)