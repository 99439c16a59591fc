# gpuz_monitor/state.py
import math
import time
import threading
import logging
log = logging.getLogger(__name__)

_LOCK = threading.Lock()
_STAT = None
_SAMPLED_AT = None
_LAST_ERROR = None
_DIRTY = set()


def _same_value(old, new):
    if old is None or new is None:
        return old is new
    if math.isnan(old) and math.isnan(new):
        return True
    return old == new


def update_stat(stat):
    """
    Store a fresh sample and mark sensors whose value changed as dirty.
    """
    global _STAT, _SAMPLED_AT, _LAST_ERROR

    with _LOCK:
        previous = _STAT
        for name in stat.available_sensors:
            old = previous.get_sensor_value(name) if previous else None
            if not _same_value(old, stat.get_sensor_value(name)):
                _DIRTY.add(name)

        _STAT = stat
        _SAMPLED_AT = time.time()
        _LAST_ERROR = None


def set_error(err):
    global _LAST_ERROR
    with _LOCK:
        _LAST_ERROR = str(err)


def get_stat():
    with _LOCK:
        return _STAT


def get_status():
    with _LOCK:
        return {
            "sampled_at": _SAMPLED_AT,
            "last_error": _LAST_ERROR,
            "sensors": len(_STAT.sensor_records) if _STAT else 0,
            "records": len(_STAT.records) if _STAT else 0,
        }


def get_sensor_updates():
    """
    Returns {name: value} for sensors changed since the previous call.
    """
    updates = {}
    with _LOCK:
        for name in list(_DIRTY):
            if _STAT is not None:
                value = _STAT.get_sensor_value(name)
                if value is not None:
                    updates[name] = value
            _DIRTY.discard(name)
    return updates


def reset():
    global _STAT, _SAMPLED_AT, _LAST_ERROR
    with _LOCK:
        _STAT = None
        _SAMPLED_AT = None
        _LAST_ERROR = None
        _DIRTY.clear()
