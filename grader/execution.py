import logging
from typing import List, Optional

import pydantic
import requests

import grader.constants as constants

from .common import session
from .errors import ExecutionError
from .models import ExecutionPayload, ExecutionResponse, TestCase

logger = logging.getLogger(__name__)


class Executor:
    """Runs code against test cases in an external sandbox."""

    def execute(self, code: str, language: str, test_cases: List[TestCase],
                action: str) -> ExecutionResponse:
        raise NotImplementedError


class HttpExecutor(Executor):
    def __init__(self, url: Optional[str] = None, timeout: float = constants.REQUEST_TIMEOUT):
        self.url = url or constants.EXECUTION_API_URL
        self.timeout = timeout

    def execute(self, code: str, language: str, test_cases: List[TestCase],
                action: str) -> ExecutionResponse:
        body = {
            'code': code,
            'language': language,
            'testCases': [test_case.to_dict() for test_case in test_cases],
            'action': action
        }
        logger.debug(f'POST {self.url} ({action}, {language}, {len(test_cases)} test cases)')
        try:
            response = session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Execution service unreachable: {e}')
            raise ExecutionError(f'Failed to execute code: {e}') from e

        if not response.ok:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = data.get('message') if isinstance(data, dict) else None
            raise ExecutionError(message or f'HTTP {response.status_code}: {response.reason}')

        try:
            payload = ExecutionPayload.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            logger.error(f'Malformed response from execution service: {e}')
            raise ExecutionError('Malformed response from execution service') from e

        return ExecutionResponse(
            test_results=[result.to_test_result() for result in payload.test_results],
            execution_time=payload.execution_time,
            memory_usage=payload.memory_usage
        )
