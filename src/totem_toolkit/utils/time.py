import time

ONE_DAY_MS = 24 * 60 * 60 * 1000


def get_current_timestamp() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
