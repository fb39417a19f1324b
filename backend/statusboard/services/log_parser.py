"""Extracts the Trivy severity summary from raw GitHub Actions job logs."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from statusboard.dtos.github import GithubWorkflowJob

JobMatcher = Callable[[GithubWorkflowJob], bool]


@dataclass
class TrivySummary:
    summary: str
    total: int
    low: int
    medium: int
    high: int
    critical: int


class TrivyLogParser:
    """Finds the first ``Total: N (LOW: a, MEDIUM: b, HIGH: c, CRITICAL: d)`` line."""

    SUMMARY_PATTERN = re.compile(
        r"Total: (?P<total>\d+) \(LOW: (?P<low>\d+), MEDIUM: (?P<medium>\d+), "
        r"HIGH: (?P<high>\d+), CRITICAL: (?P<critical>\d+)\)"
    )

    def parse(self, text: str) -> Optional[TrivySummary]:
        match = self.SUMMARY_PATTERN.search(text or "")
        if not match:
            return None
        return TrivySummary(
            summary=match.group(0),
            total=int(match.group("total")),
            low=int(match.group("low")),
            medium=int(match.group("medium")),
            high=int(match.group("high")),
            critical=int(match.group("critical")),
        )


def keyword_job_matcher(keywords: Iterable[str]) -> JobMatcher:
    """Match jobs whose name contains any keyword, case-insensitive."""
    needles = [keyword.lower() for keyword in keywords if keyword]

    def _matches(job: GithubWorkflowJob) -> bool:
        name = (job.name or "").lower()
        return any(needle in name for needle in needles)

    return _matches


def find_scan_job(
    jobs: List[GithubWorkflowJob], matcher: JobMatcher
) -> Optional[GithubWorkflowJob]:
    return next((job for job in jobs if matcher(job)), None)
