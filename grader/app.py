import logging
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import grader.constants as constants

from .errors import ErrorCode
from .execution import HttpExecutor
from .judge import evaluate_submission, run_code
from .models import RunRequest, SubmissionRequest
from .stats import create_submission_summary
from .submission_store import InMemorySubmissionStore
from .test_case_manager import TestCaseManager

logger = logging.getLogger(__name__)

app = FastAPI()
app.state.executor = HttpExecutor()
app.state.store = InMemorySubmissionStore()

AUTH_FAILURE = {'success': False, 'error': {'code': 'AUTH_ERROR', 'message': 'Invalid auth token'}}


def _authorized(x_auth_token: Optional[str]) -> bool:
    secret_key = constants.CONFIG.get('secret_key')
    if secret_key is None or x_auth_token == secret_key:
        return True
    logger.warning('Rejected request with invalid auth token')
    return False


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = '; '.join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content={'success': False, 'error': {'code': ErrorCode.VALIDATION_ERROR.value, 'message': message}}
    )


@app.get('/ping')
def ping():
    return {'success': True}


@app.post('/run')
def run_solution(run_request: RunRequest, request: Request,
                 x_auth_token: Optional[str] = Header(None)):
    if not _authorized(x_auth_token):
        return AUTH_FAILURE

    if run_request.test_cases is None and run_request.problem_id:
        run_request.test_cases = list(TestCaseManager.load_test_cases(run_request.problem_id))
    return run_code(run_request, request.app.state.executor).to_dict()


@app.post('/submit')
def submit_solution(submission_request: SubmissionRequest, request: Request,
                    x_auth_token: Optional[str] = Header(None)):
    if not _authorized(x_auth_token):
        return AUTH_FAILURE

    if submission_request.test_cases is None and submission_request.problem_id:
        submission_request.test_cases = list(
            TestCaseManager.load_test_cases(submission_request.problem_id)
        )
    result = evaluate_submission(submission_request, request.app.state.executor, request.app.state.store)
    return result.to_dict()


@app.get('/users/{uid}/summary')
def user_summary(uid: str, request: Request, limit: int = 100,
                 x_auth_token: Optional[str] = Header(None)):
    if not _authorized(x_auth_token):
        return AUTH_FAILURE

    result = request.app.state.store.get_user_submissions(uid, limit)
    if not result.success:
        return {'success': False, 'error': {'code': ErrorCode.DATABASE_ERROR.value,
                                            'message': result.error.message}}
    return {'success': True, 'summary': create_submission_summary(result.data).to_dict()}


@app.get('/problems/{problem_id}/summary')
def problem_summary(problem_id: str, request: Request, limit: int = 100,
                    x_auth_token: Optional[str] = Header(None)):
    if not _authorized(x_auth_token):
        return AUTH_FAILURE

    result = request.app.state.store.get_problem_submissions(problem_id, limit)
    if not result.success:
        return {'success': False, 'error': {'code': ErrorCode.DATABASE_ERROR.value,
                                            'message': result.error.message}}
    return {'success': True, 'summary': create_submission_summary(result.data).to_dict()}
