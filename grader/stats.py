from collections import Counter
from typing import Any, Dict, Sequence, Union

from .models import ExecutionStats, Submission, SubmissionSummary, TestResult
from .verdict import Verdict


def get_execution_stats(test_results: Sequence[TestResult]) -> ExecutionStats:
    # failed cases still consumed time and memory, so every result counts
    if not test_results:
        return ExecutionStats()

    execution_times = [result.execution_time for result in test_results]
    memory_usages = [result.memory_usage for result in test_results]
    total_execution_time = sum(execution_times)
    total_memory_usage = sum(memory_usages)

    return ExecutionStats(
        total_execution_time=total_execution_time,
        average_execution_time=total_execution_time / len(test_results),
        max_execution_time=max(execution_times),
        total_memory_usage=total_memory_usage,
        average_memory_usage=total_memory_usage / len(test_results),
        max_memory_usage=max(memory_usages)
    )


def create_submission_summary(
        submissions: Sequence[Union[Submission, Dict[str, Any]]]) -> SubmissionSummary:
    """Summarizes a user's or a problem's submission history.

    Submissions may be given as ``Submission`` objects or as the camelCase
    dicts the store persists. Averages only consider submissions that carry
    an execution time / memory usage.
    """
    if not submissions:
        return SubmissionSummary()

    submissions = [s if isinstance(s, Submission) else Submission.from_dict(s) for s in submissions]

    language_distribution = Counter(submission.language for submission in submissions)
    status_distribution = Counter(Verdict(submission.status).value for submission in submissions)
    accepted = status_distribution.get(Verdict.AC.value, 0)

    execution_times = [s.execution_time for s in submissions if s.execution_time is not None]
    memory_usages = [s.memory_usage for s in submissions if s.memory_usage is not None]

    return SubmissionSummary(
        total_submissions=len(submissions),
        accepted_submissions=accepted,
        success_rate=int(accepted / len(submissions) * 100 + 0.5),  # halves round up
        language_distribution=dict(language_distribution),
        status_distribution=dict(status_distribution),
        average_execution_time=sum(execution_times) / len(execution_times) if execution_times else 0,
        average_memory_usage=sum(memory_usages) / len(memory_usages) if memory_usages else 0
    )
