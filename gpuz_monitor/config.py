"""
Monitor configuration.

Every setting has a default and can be overridden from the environment.
"""

import os

from gpuz_shm.shm_layout import REGION_NAME, SHM_BASE_PATH

# ---------------------------------------------------------------------------
# Shared memory
# ---------------------------------------------------------------------------

SHM_NAME = os.environ.get("GPUZ_SHM_NAME", REGION_NAME)
SHM_BASE = os.environ.get("GPUZ_SHM_BASE_PATH", SHM_BASE_PATH)

# ---------------------------------------------------------------------------
# Poller
# ---------------------------------------------------------------------------

POLL_INTERVAL_SEC = float(os.environ.get("GPUZ_POLL_INTERVAL", "1.0"))
BUSY_RETRIES = int(os.environ.get("GPUZ_BUSY_RETRIES", "3"))
BUSY_RETRY_DELAY_SEC = float(os.environ.get("GPUZ_BUSY_RETRY_DELAY", "0.01"))

