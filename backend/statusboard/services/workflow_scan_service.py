"""Collects recent security-scan workflow runs and their vulnerability counts."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError

from statusboard.config import settings
from statusboard.dtos.dashboard import WorkflowRunSummary
from statusboard.dtos.github import GithubWorkflowJob, GithubWorkflowRun
from statusboard.services.github.exceptions import GithubError
from statusboard.services.github.github_client import GitHubClient
from statusboard.services.log_parser import (
    JobMatcher,
    TrivyLogParser,
    find_scan_job,
    keyword_job_matcher,
)

logger = logging.getLogger(__name__)

DETAILS_ERROR_SUMMARY = "Error fetching details"


class WorkflowScanFetcher:
    def __init__(
        self,
        client: GitHubClient,
        job_matcher: Optional[JobMatcher] = None,
        parser: Optional[TrivyLogParser] = None,
    ):
        self.client = client
        self.job_matcher = job_matcher or keyword_job_matcher(settings.SCAN_JOB_KEYWORDS)
        self.parser = parser or TrivyLogParser()

    async def get_latest_workflow_runs(
        self,
        owner: str,
        repo: str,
        workflow_file_name: str,
        count: int | None = None,
    ) -> List[WorkflowRunSummary]:
        """
        Return the newest ``count`` runs of a workflow, newest first.

        Run details (jobs + log) are fetched concurrently; a failure for one
        run degrades only that run. A failure listing the runs yields ``[]``.
        """
        full_name = f"{owner}/{repo}"
        if count is None:
            count = settings.SCAN_RUNS_PER_REPOSITORY
        if count <= 0:
            return []
        try:
            raw_runs = await self.client.list_workflow_runs(
                full_name, workflow_file_name, per_page=count
            )
            runs = [GithubWorkflowRun.model_validate(r) for r in raw_runs]
        except (GithubError, ValidationError) as e:
            logger.error(
                f"Error fetching workflow runs for {full_name} ({workflow_file_name}): {e}"
            )
            return []

        if not runs:
            return []

        # gather() returns results in argument order regardless of completion order
        return list(
            await asyncio.gather(*(self._summarize_run(full_name, run) for run in runs))
        )

    async def _summarize_run(
        self, full_name: str, run: GithubWorkflowRun
    ) -> WorkflowRunSummary:
        summary = WorkflowRunSummary(
            conclusion=run.conclusion,
            timestamp=run.created_at,
            run_url=run.html_url,
            run_id=run.id,
        )
        try:
            await self._attach_vulnerabilities(full_name, run, summary)
        except (GithubError, ValidationError, KeyError, TypeError) as e:
            logger.warning(
                f"Could not fetch job/log details for run {run.id} in {full_name}: {e}"
            )
            summary.vulnerability_summary = DETAILS_ERROR_SUMMARY
            summary.low_count = summary.medium_count = 0
            summary.high_count = summary.critical_count = 0
        return summary

    async def _attach_vulnerabilities(
        self, full_name: str, run: GithubWorkflowRun, summary: WorkflowRunSummary
    ) -> None:
        raw_jobs = await self.client.list_workflow_jobs(full_name, run.id)
        jobs = [GithubWorkflowJob.model_validate(j) for j in raw_jobs]
        job = find_scan_job(jobs, self.job_matcher)
        if job is None:
            logger.debug(f"No scan job found for run {run.id} in {full_name}")
            return

        log_text = await self.client.download_job_logs(full_name, job.id)
        parsed = self.parser.parse(log_text)
        if parsed is None:
            return

        summary.vulnerability_summary = parsed.summary
        summary.low_count = parsed.low
        summary.medium_count = parsed.medium
        summary.high_count = parsed.high
        summary.critical_count = parsed.critical
