from typing import List, Optional

from grader.execution import Executor
from grader.models import ExecutionResponse, TestResult


def make_result(passed: bool = True, execution_time: float = 100, memory_usage: float = 1024,
                error: Optional[str] = None, actual_output: str = '25') -> TestResult:
    return TestResult(
        passed=passed,
        input='5',
        expected_output='25',
        actual_output=actual_output,
        execution_time=execution_time,
        memory_usage=memory_usage,
        error=error
    )


class StubExecutor(Executor):
    """Returns canned results and records every call."""

    def __init__(self, results: Optional[List[TestResult]] = None, exception: Optional[Exception] = None):
        self.results = results
        self.exception = exception
        self.calls = []

    def execute(self, code, language, test_cases, action):
        self.calls.append({'code': code, 'language': language,
                           'test_cases': list(test_cases), 'action': action})
        if self.exception is not None:
            raise self.exception
        results = self.results
        if results is None:
            results = [
                TestResult(True, tc.input, tc.expected_output, tc.expected_output, 10, 1024)
                for tc in test_cases
            ]
        return ExecutionResponse(test_results=results)


