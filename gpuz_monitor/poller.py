# gpuz_monitor/poller.py

import time
import threading
import logging
from functools import partial

from gpuz_shm import NoData, ShortRead, SourceUnavailable, decode, open_region
from gpuz_shm.errors import GpuzShmError
from gpuz_shm.shm_layout import REGION_SIZE

from gpuz_monitor import config, state

log = logging.getLogger(__name__)


class SensorPoller:
    def __init__(
        self,
        opener=None,
        on_update=None,
        poll_interval: float = config.POLL_INTERVAL_SEC,
        busy_retries: int = config.BUSY_RETRIES,
        busy_retry_delay: float = config.BUSY_RETRY_DELAY_SEC,
    ):
        self.opener = opener or partial(open_region, config.SHM_NAME, base_path=config.SHM_BASE)
        self.on_update = on_update
        self.poll_interval = poll_interval
        self.busy_retries = busy_retries
        self.busy_retry_delay = busy_retry_delay
        self.running = False
        self._thread = None

    # ------------------------------------------------
    # Sampling
    # ------------------------------------------------

    def sample(self):
        """
        Decode one snapshot, re-reading while the producer reports busy.

        After busy_retries the last snapshot is accepted as-is.
        """
        stat = decode(self.opener, REGION_SIZE)

        for _ in range(self.busy_retries):
            if not stat.is_busy:
                break
            time.sleep(self.busy_retry_delay)
            stat = decode(self.opener, REGION_SIZE)

        if stat.is_busy:
            log.debug("[Poller] accepting sample taken while producer busy")

        return stat

    def poll_once(self):
        """
        Take one sample and publish it. Returns the Stat or None on failure.
        """
        try:
            stat = self.sample()

        except SourceUnavailable as e:
            log.info(f"[Poller] GPU-Z not running: {e}")
            state.set_error(e)
            return None

        except NoData as e:
            log.info(f"[Poller] GPU-Z idle: {e}")
            state.set_error(e)
            return None

        except ShortRead as e:
            log.warning(f"[Poller] region layout mismatch: {e}")
            state.set_error(e)
            return None

        except GpuzShmError as e:
            log.warning(f"[Poller] decode failed: {e}")
            state.set_error(e)
            return None

        state.update_stat(stat)

        if self.on_update is not None:
            try:
                self.on_update(state.get_sensor_updates(), stat)
            except Exception:
                # Never let a consumer break sampling
                log.exception("[Poller] update callback failed")

        return stat

    # ------------------------------------------------
    # Main loop
    # ------------------------------------------------

    def run(self):
        self.running = True
        self._loop()

    def _loop(self):
        log.info("[Poller] started")

        while self.running:
            start = time.time()

            try:
                self.poll_once()
            except Exception:
                log.exception("[Poller] unexpected error")

            # Maintain poll rate
            dt = time.time() - start
            if dt < self.poll_interval:
                time.sleep(self.poll_interval - dt)

        log.info("[Poller] stopped")

    def start(self):
        self.running = True
        self._thread = threading.Thread(target=self._loop, name="SensorPoller", daemon=True)
        self._thread.start()

    def stop(self):
        self.running = False
        if self._thread is not None:
            self._thread.join(timeout=self.poll_interval + 1.0)
