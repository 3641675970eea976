"""Span reporters and supporting utilities."""

from ziptrace.reporter.async_reporter import AsyncReporter
from ziptrace.reporter.base import NoopReporter, Reporter
from ziptrace.reporter.drop_policy import (
    DEFAULT_DROP_POLICY,
    DropNewestPolicy,
    DropOldestPolicy,
    DropPolicy,
    drop_policy_for,
)
from ziptrace.reporter.factory import build_reporter
from ziptrace.reporter.logging_reporter import LoggingReporter

__all__ = [
    "Reporter",
    "NoopReporter",
    "AsyncReporter",
    "LoggingReporter",
    "DropPolicy",
    "DropOldestPolicy",
    "DropNewestPolicy",
    "DEFAULT_DROP_POLICY",
    "drop_policy_for",
    "build_reporter",
]
