import logging
import time
from dataclasses import replace
from typing import Any, List

import grader.constants as constants

from .classifier import classify_verdict
from .errors import (DatabaseError, ErrorCode, ErrorInfo, ExecutionError, GraderError,
                     SubmissionValidationError)
from .execution import Executor
from .language import SUPPORTED_LANGUAGES
from .models import (EvaluationResult, ExecutionResponse, RunRequest, RunResult, Submission,
                     SubmissionRequest, TestCase)
from .stats import get_execution_stats
from .submission_store import SubmissionStore
from .test_case_manager import TestCaseManager

logger = logging.getLogger(__name__)


def _validate_code(code: Any, language: Any) -> None:
    if not code or not isinstance(code, str):
        raise SubmissionValidationError('Code is required')
    if len(code) > constants.MAX_CODE_LENGTH:
        raise SubmissionValidationError(
            f'Code is too long (max {constants.MAX_CODE_LENGTH:,} characters)'
        )
    if language not in SUPPORTED_LANGUAGES:
        raise SubmissionValidationError(f'Unsupported language: {language}')


def _validate_test_cases(test_cases: Any) -> List[TestCase]:
    validation = TestCaseManager.validate(test_cases)
    if not validation.is_valid:
        raise SubmissionValidationError(
            'Test case validation failed: ' + ', '.join(validation.errors)
        )
    return TestCaseManager.normalize(test_cases)


def validate_submission_request(request: SubmissionRequest) -> List[TestCase]:
    if not request.uid or not isinstance(request.uid, str):
        raise SubmissionValidationError('Valid user ID is required')
    if not request.problem_id or not isinstance(request.problem_id, str):
        raise SubmissionValidationError('Valid problem ID is required')
    _validate_code(request.code, request.language)
    return _validate_test_cases(request.test_cases)


def validate_run_request(request: RunRequest) -> List[TestCase]:
    _validate_code(request.code, request.language)
    if request.action != 'run':
        raise SubmissionValidationError('Action must be "run"; graded runs go through submission')
    return _validate_test_cases(request.test_cases)


def execute_code(executor: Executor, code: str, language: str,
                 test_cases: List[TestCase], action: str) -> ExecutionResponse:
    # hidden test cases never leave the grader for a practice run
    if action == 'run':
        test_cases = TestCaseManager.filter_public(test_cases)
    if not test_cases:
        raise ExecutionError('No test cases available for execution')

    response = executor.execute(code, language, test_cases, action)
    if not response.test_results:
        raise ExecutionError('Execution service returned no test results')

    # pass/fail is decided here, not by the execution service
    test_results = [
        TestCaseManager.create_test_result(
            TestCase(result.input, result.expected_output),
            result.actual_output,
            result.execution_time,
            result.memory_usage,
            result.error or None
        )
        for result in response.test_results
    ]
    return replace(response, test_results=test_results)


def run_code(request: RunRequest, executor: Executor) -> RunResult:
    """Runs code against the public test cases only. Nothing is persisted."""
    try:
        test_cases = validate_run_request(request)
        response = execute_code(executor, request.code, request.language, test_cases, 'run')
        verdict_result = classify_verdict(response.test_results)
        return RunResult(
            success=True,
            test_results=response.test_results,
            verdict=verdict_result.verdict,
            details=verdict_result.details,
            execution_stats=get_execution_stats(response.test_results),
            execution_time=response.execution_time,
            memory_usage=response.memory_usage
        )
    except GraderError as e:
        logger.info(f'run rejected ({e.code.value}): {e}')
        return RunResult(success=False, error=e.to_error_info())
    except Exception as e:
        logger.exception('Code execution error')
        return RunResult(success=False, error=ErrorInfo(ErrorCode.UNKNOWN_ERROR, str(e)))


def evaluate_submission(request: SubmissionRequest, executor: Executor,
                        store: SubmissionStore) -> EvaluationResult:
    """Grades a submission against every test case and records it.

    A submission is only reported as graded once the store has accepted it;
    if saving fails the caller gets a DATABASE_ERROR instead of the verdict.
    """
    start_time = time.perf_counter()
    try:
        test_cases = validate_submission_request(request)

        logger.info(f'{request.uid}/{request.problem_id}: executing {len(test_cases)} test cases')
        response = execute_code(executor, request.code, request.language, test_cases, 'submit')

        test_results = response.test_results
        verdict_result = classify_verdict(test_results)
        execution_stats = get_execution_stats(test_results)
        logger.info(f'{request.uid}/{request.problem_id}: {verdict_result.verdict.value} '
                    f'({verdict_result.details})')

        submission = Submission(
            uid=request.uid,
            problem_id=request.problem_id,
            code=request.code,
            language=request.language,
            status=verdict_result.verdict,
            execution_time=execution_stats.average_execution_time,
            memory_usage=execution_stats.average_memory_usage,
            test_results=test_results
        )
        save_result = store.create_submission(submission)
        if not save_result.success:
            message = save_result.error.message if save_result.error else 'Failed to save submission'
            raise DatabaseError(message)

        end_time = time.perf_counter()
        logger.info(f'submission {save_result.data}: completed in {end_time - start_time:.4f}s')
        return EvaluationResult(
            success=True,
            submission_id=save_result.data,
            verdict=verdict_result.verdict,
            details=verdict_result.details,
            test_results=test_results,
            execution_stats=execution_stats
        )
    except GraderError as e:
        if isinstance(e, SubmissionValidationError):
            logger.info(f'submission rejected: {e}')
        else:
            logger.error(f'submission failed ({e.code.value}): {e}')
        return EvaluationResult(success=False, error=e.to_error_info())
    except Exception as e:
        logger.exception('Submission evaluation error')
        return EvaluationResult(success=False, error=ErrorInfo(ErrorCode.UNKNOWN_ERROR, str(e)))
