"""
Test Configuration

This module provides:
- Kvrocks key isolation with worker-specific key prefixes
- A dedicated log directory for test runs
- Scripted operator answers, so no test ever waits on a console prompt

Architecture:
- Unit tests (test/**/unit/): in-memory store fakes and AsyncMock collaborators
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# This ensures KVROCKS_KEY_PREFIX and TEST_LOG_DIR are set before modules
# that read them at import time (e.g., key_str_generator.py, loguru_io_config.py)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['KVROCKS_KEY_PREFIX'] = 'test_'
    else:
        os.environ['KVROCKS_KEY_PREFIX'] = f'test_{worker_id}_'

    # Create test log directory
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['OPERATOR_PROMPT_MODE'] = 'scripted'


# Call immediately to set env vars before any imports
_early_setup_test_environment()
