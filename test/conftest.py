"""
Test Configuration

Environment setup must run before any application module is imported:
settings and the log sink read these variables at import time.

Unit tests run against in-memory doubles (see test/service/booking/conftest.py);
nothing here needs PostgreSQL or Redis.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['POSTGRES_DB'] = 'slot_booking_test_db'
    else:
        os.environ['POSTGRES_DB'] = f'slot_booking_test_db_{worker_id}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DB_POOL_SIZE', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')
    os.environ.setdefault('BOOKING_EVENT_CHANNEL_PREFIX', 'test_booking_events')


_early_setup_test_environment()
