import json
import logging
import os
import sys

import uvicorn

import grader.constants as constants

from .app import app
from .common import session
from .execution import HttpExecutor
from .submission_store import HttpSubmissionStore

logger = logging.getLogger(__name__)


def main():
    if len(sys.argv) >= 2:
        constants.DEBUG = True

    logging.basicConfig(
        level=logging.DEBUG if constants.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("debug.log")
        ],
        force=True
    )

    if not os.path.exists('config.json'):
        logger.error('Please add a config.json file. Aborting.')
        sys.exit(1)
    with open('config.json') as f:
        constants.CONFIG = json.load(f)

    if 'secret_key' in constants.CONFIG:
        session.headers['X-Auth-Token'] = constants.CONFIG['secret_key']
    constants.EXECUTION_API_URL = constants.CONFIG.get('execution_api_url', constants.EXECUTION_API_URL)
    constants.PROBLEMS_DIR = constants.CONFIG.get('problems_dir', constants.PROBLEMS_DIR)

    app.state.executor = HttpExecutor(constants.EXECUTION_API_URL)
    if 'store_url' in constants.CONFIG:
        constants.STORE_URL = constants.CONFIG['store_url']
        app.state.store = HttpSubmissionStore(constants.STORE_URL)
    else:
        logger.warning('No store_url configured, submissions are kept in memory only')

    uvicorn.run(app, port=constants.CONFIG.get('port', 8000), host=constants.CONFIG.get('host', '0.0.0.0'))


if __name__ == '__main__':
    main()
