from __future__ import annotations

import io
from collections import Counter
from collections.abc import Iterable

from ..models.dataset import TabularDataset
from .differ import DatasetDiffer
from .printer import print_report

"""Assertion helpers for BVT test suites."""

__all__ = [
    "assert_no_differences",
    "assert_equivalent",
]


def assert_no_differences(
    expected: TabularDataset, actual: TabularDataset, differ: DatasetDiffer | None = None
) -> None:
    """Fail with the rendered diff report when expected and actual differ."""
    report = (differ or DatasetDiffer()).compare(expected, actual)
    if report is None:
        return
    buf = io.StringIO()
    print_report(report, file=buf)
    raise AssertionError(
        f"{len(report)} differences between '{expected.name}' and '{actual.name}':{buf.getvalue()}"
    )


def assert_equivalent(expected: Iterable[str], actual: Iterable[str]) -> None:
    """Assert both collections hold the same items with the same counts, in any order.

    Typical use: schema object listings (tables, views, roles) of a deployed database.
    """
    exp = Counter(expected)
    act = Counter(actual)
    problems = []
    exp_total = sum(exp.values())
    act_total = sum(act.values())
    if exp_total != act_total:
        problems.append(f"count expected={exp_total} actual={act_total}")
    missing = sorted((exp - act).elements())
    extra = sorted((act - exp).elements())
    if missing:
        problems.append(f"missing={missing}")
    if extra:
        problems.append(f"unexpected={extra}")
    if problems:
        raise AssertionError("collections are not equivalent: " + " ".join(problems))
