import copy
import logging
import math
import secrets
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

import requests

import grader.constants as constants

from .common import session
from .errors import ErrorCode, ErrorInfo
from .language import SUPPORTED_LANGUAGES
from .models import Submission, TestResult
from .verdict import Verdict

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class StoreResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None


def _is_non_negative_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float)) and not isinstance(value, bool)
        and math.isfinite(value) and value >= 0
    )


def _validate_test_result(result: Any) -> List[str]:
    if not isinstance(result, TestResult):
        return ['Test result is malformed']

    errors = []
    if not isinstance(result.passed, bool):
        errors.append('passed: Passed must be a boolean')
    for name, label in (('input', 'input'), ('expected_output', 'expectedOutput'),
                        ('actual_output', 'actualOutput')):
        if not isinstance(getattr(result, name), str):
            errors.append(f'{label}: {label} is required and must be a string')
    if not _is_non_negative_number(result.execution_time):
        errors.append('executionTime: Execution time must be a non-negative number')
    if not _is_non_negative_number(result.memory_usage):
        errors.append('memoryUsage: Memory usage must be a non-negative number')
    if result.error is not None:
        if not isinstance(result.error, str):
            errors.append('error: Error must be a string')
        elif result.passed:
            errors.append('passed: A test case with an error cannot pass')
    return errors


def validate_submission_data(submission: Submission) -> List[str]:
    """Checks a submission against the limits of the persisted record.

    These are stricter than the request pre-checks: stored code is capped at
    ``MAX_STORED_CODE_LENGTH`` characters.
    """
    errors = []
    if not isinstance(submission.uid, str) or not submission.uid.strip():
        errors.append('uid: User ID cannot be empty')
    if not isinstance(submission.problem_id, str) or not submission.problem_id.strip():
        errors.append('problemId: Problem ID cannot be empty')

    if not isinstance(submission.code, str) or not submission.code.strip():
        errors.append('code: Code cannot be empty')
    elif len(submission.code) > constants.MAX_STORED_CODE_LENGTH:
        errors.append(f'code: Code must be at most {constants.MAX_STORED_CODE_LENGTH:,} characters')

    if submission.language not in SUPPORTED_LANGUAGES:
        errors.append('language: Invalid programming language')
    if not isinstance(submission.status, Verdict):
        errors.append('status: Invalid submission status')

    for name, label in (('execution_time', 'executionTime'), ('memory_usage', 'memoryUsage')):
        value = getattr(submission, name)
        if value is not None and not _is_non_negative_number(value):
            errors.append(f'{label}: must be a non-negative number')

    if not submission.test_results:
        errors.append('testResults: At least one test result is required')
    else:
        for i, result in enumerate(submission.test_results):
            errors += [f'testResults[{i}].{error}' for error in _validate_test_result(result)]
    return errors


class SubmissionStore:
    """Durable record of graded submissions. Records are never updated."""

    def create_submission(self, submission: Submission) -> StoreResult[str]:
        errors = validate_submission_data(submission)
        if errors:
            logger.warning(f'Rejected submission by {submission.uid!r}: {errors}')
            return StoreResult(False, error=ErrorInfo(
                ErrorCode.VALIDATION_ERROR,
                'Submission validation failed: ' + ', '.join(errors)
            ))
        return self._save(submission)

    def _save(self, submission: Submission) -> StoreResult[str]:
        raise NotImplementedError

    def get_submission(self, submission_id: str) -> StoreResult[Submission]:
        raise NotImplementedError

    def get_user_submissions(self, uid: str, limit: int = 20) -> StoreResult[List[Submission]]:
        raise NotImplementedError

    def get_problem_submissions(self, problem_id: str, limit: int = 50) -> StoreResult[List[Submission]]:
        raise NotImplementedError


class InMemorySubmissionStore(SubmissionStore):
    def __init__(self):
        self.submissions: Dict[str, Submission] = {}
        self.lock = threading.RLock()

    def _save(self, submission: Submission) -> StoreResult[str]:
        submission_id = secrets.token_hex(10)
        record = replace(copy.deepcopy(submission), id=submission_id,
                         submitted_at=datetime.now(timezone.utc))
        with self.lock:
            self.submissions[submission_id] = record
        return StoreResult(True, data=submission_id)

    def get_submission(self, submission_id: str) -> StoreResult[Submission]:
        with self.lock:
            submission = self.submissions.get(submission_id)
        if submission is None:
            return StoreResult(False, error=ErrorInfo(ErrorCode.DATABASE_ERROR, 'Submission not found'))
        return StoreResult(True, data=copy.deepcopy(submission))

    def _query(self, field: str, value: str, limit: int) -> List[Submission]:
        # newest first; dict order is insertion order
        with self.lock:
            matches = [s for s in reversed(self.submissions.values()) if getattr(s, field) == value]
        return [copy.deepcopy(s) for s in matches[:limit]]

    def get_user_submissions(self, uid: str, limit: int = 20) -> StoreResult[List[Submission]]:
        return StoreResult(True, data=self._query('uid', uid, limit))

    def get_problem_submissions(self, problem_id: str, limit: int = 50) -> StoreResult[List[Submission]]:
        return StoreResult(True, data=self._query('problem_id', problem_id, limit))


class HttpSubmissionStore(SubmissionStore):
    def __init__(self, url: Optional[str] = None, timeout: float = constants.REQUEST_TIMEOUT):
        self.url = (url or constants.STORE_URL).rstrip('/')
        self.timeout = timeout

    def _request(self, method: str, path: str = '', **kwargs) -> Any:
        response = session.request(method, self.url + path, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        return response.json()

    def _failure(self, operation: str, e: Exception) -> StoreResult:
        logger.error(f'{operation} failed: {e}')
        return StoreResult(False, error=ErrorInfo(ErrorCode.DATABASE_ERROR, str(e)))

    def _save(self, submission: Submission) -> StoreResult[str]:
        body = submission.to_dict()
        del body['id'], body['submittedAt']
        try:
            data = self._request('POST', json=body)
            return StoreResult(True, data=data['id'])
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            return self._failure('create_submission', e)

    def get_submission(self, submission_id: str) -> StoreResult[Submission]:
        try:
            return StoreResult(True, data=Submission.from_dict(self._request('GET', f'/{submission_id}')))
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            return self._failure('get_submission', e)

    def _query(self, params: Dict[str, Any]) -> StoreResult[List[Submission]]:
        try:
            data = self._request('GET', params=params)
            return StoreResult(True, data=[Submission.from_dict(s) for s in data])
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            return self._failure('query submissions', e)

    def get_user_submissions(self, uid: str, limit: int = 20) -> StoreResult[List[Submission]]:
        return self._query({'uid': uid, 'limit': limit})

    def get_problem_submissions(self, problem_id: str, limit: int = 50) -> StoreResult[List[Submission]]:
        return self._query({'problemId': problem_id, 'limit': limit})
