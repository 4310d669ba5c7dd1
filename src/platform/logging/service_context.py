"""
Service context extraction for logging.

Identifies which process produced a log line: the seating CLI, an operator
session or a test run can all write to the same log directory.
"""

import os
from functools import lru_cache
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'seating')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    try:
        host = socket.gethostname().split('.')[0][:12] or 'local'
    except OSError:
        host = 'local'

    return f'{service_name}@{deploy_env}:{host}:{os.getpid()}'
