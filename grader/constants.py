import os
from typing import Any, Dict

DEBUG = False
CONFIG: Dict[str, Any] = {}

EXECUTION_API_URL = os.environ.get('EXECUTION_API_URL', 'http://localhost:3000/api/compile')
STORE_URL = os.environ.get('STORE_URL', 'http://localhost:3000/api/submissions')
PROBLEMS_DIR = os.environ.get('PROBLEMS_DIR', 'problems')

MAX_EXECUTION_TIME = 5000  # milliseconds
MAX_CODE_LENGTH = 100000  # request pre-check
MAX_STORED_CODE_LENGTH = 50000  # persisted submission
MAX_TEST_CASES = 100
MAX_TEST_CASE_INPUT_LENGTH = 10000
MAX_TEST_CASE_OUTPUT_LENGTH = 10000

REQUEST_TIMEOUT = 30  # seconds
