from typing import Sequence

import grader.constants as constants

from .models import TestResult, VerdictResult
from .verdict import Verdict


def _error_contains(result: TestResult, text: str) -> bool:
    return bool(result.error) and text in result.error.lower()


def is_compilation_error(result: TestResult) -> bool:
    return _error_contains(result, 'compilation error')


def is_time_limit_exceeded(result: TestResult) -> bool:
    return (
        _error_contains(result, 'time limit')
        or result.execution_time > constants.MAX_EXECUTION_TIME
    )


def classify_verdict(test_results: Sequence[TestResult]) -> VerdictResult:
    """Reduces the per-case outcomes of one submission to a single verdict.

    A submission can show several failure symptoms at once (a crash that is
    also slow looks like both a runtime error and a timeout), so the rules
    are checked over the whole result set in a fixed order and the first one
    that matches wins:

    1. Compilation Error, if any error mentions "compilation error"
    2. Time Limit Exceeded, if any error mentions "time limit" or any case
       ran longer than ``MAX_EXECUTION_TIME``
    3. Runtime Error, if any other error is present
    4. Wrong Answer, if any case failed without an error
    5. Accepted
    """
    total = len(test_results)
    if total == 0:
        return VerdictResult(Verdict.RE, 'No test results available')

    passed = sum(1 for result in test_results if result.passed)

    if any(is_compilation_error(result) for result in test_results):
        verdict = Verdict.CE
    elif any(is_time_limit_exceeded(result) for result in test_results):
        verdict = Verdict.TLE
    elif any(result.error for result in test_results):
        verdict = Verdict.RE
    elif passed < total:
        verdict = Verdict.WA
    else:
        return VerdictResult(Verdict.AC, f'All {total} test cases passed')

    return VerdictResult(verdict, f'{passed}/{total} test cases passed')
