import math
from unittest import mock

import pytest
import requests

from grader.errors import ExecutionError
from grader.execution import HttpExecutor
from grader.models import TestCase


def _response(status_code=200, payload=None, reason='OK'):
    response = mock.Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def post():
    with mock.patch('grader.execution.session') as session:
        yield session.post


def test_execute(post):
    post.return_value = _response(payload={
        'testResults': [
            {'passed': True, 'input': '5', 'expectedOutput': '25', 'actualOutput': '25',
             'executionTime': 12.5, 'memoryUsage': 2048},
            {'passed': True, 'input': '3', 'expectedOutput': '9', 'actualOutput': '',
             'executionTime': 3, 'memoryUsage': 1024, 'error': 'NameError: x'},
        ],
        'executionTime': 15.5,
        'memoryUsage': 2048,
    })
    executor = HttpExecutor('http://sandbox/compile')
    response = executor.execute('print(1)', 'Python', [TestCase('5', '25'), TestCase('3', '9')], 'submit')

    url = post.call_args.args[0]
    body = post.call_args.kwargs['json']
    assert url == 'http://sandbox/compile'
    assert body == {
        'code': 'print(1)',
        'language': 'Python',
        'testCases': [
            {'input': '5', 'expectedOutput': '25', 'isHidden': False},
            {'input': '3', 'expectedOutput': '9', 'isHidden': False},
        ],
        'action': 'submit',
    }
    assert response.execution_time == 15.5
    first, second = response.test_results
    assert first.passed and first.execution_time == 12.5
    # an error can never count as a pass
    assert not second.passed
    assert second.error == 'NameError: x'


def test_http_error_uses_server_message(post):
    post.return_value = _response(400, {'message': 'No test cases available for this action'}, 'Bad Request')
    with pytest.raises(ExecutionError, match='No test cases available for this action'):
        HttpExecutor('http://sandbox').execute('x', 'C', [TestCase('1', '1')], 'run')


def test_http_error_without_body(post):
    post.return_value = _response(500, ValueError('no json'), 'Internal Server Error')
    with pytest.raises(ExecutionError, match='HTTP 500: Internal Server Error'):
        HttpExecutor('http://sandbox').execute('x', 'C', [TestCase('1', '1')], 'run')


@pytest.mark.parametrize('payload', [
    ValueError('no json'),
    {'results': []},
    {'testResults': [{'passed': True}]},
    {'testResults': [{'passed': True, 'input': '1', 'expectedOutput': '1', 'executionTime': -1}]},
    {'testResults': [{'passed': True, 'input': '1', 'expectedOutput': '1', 'executionTime': math.inf}]},
])
def test_malformed_payload(post, payload):
    post.return_value = _response(payload=payload)
    with pytest.raises(ExecutionError, match='Malformed response'):
        HttpExecutor('http://sandbox').execute('x', 'C', [TestCase('1', '1')], 'run')


def test_connection_error(post):
    post.side_effect = requests.ConnectionError('refused')
    with pytest.raises(ExecutionError, match='refused'):
        HttpExecutor('http://sandbox').execute('x', 'C', [TestCase('1', '1')], 'run')


def test_reported_pass_is_rechecked(post):
    post.return_value = _response(payload={
        'testResults': [
            {'passed': True, 'input': '5', 'expectedOutput': '25', 'actualOutput': '24',
             'executionTime': 10, 'memoryUsage': 1024},
        ],
    })
    response = HttpExecutor('http://sandbox').execute('x', 'C', [TestCase('5', '25')], 'submit')
    assert not response.test_results[0].passed
    assert response.test_results[0].actual_output == '24'
