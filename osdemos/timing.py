"""Wall-clock time and busy waiting."""

import time


def get_time():
    """Return the current wall-clock time in seconds, with sub-second precision."""
    return time.time()


def spin(howlong):
    """Busy-wait, without sleeping, until ``howlong`` seconds have passed."""
    start = get_time()
    while get_time() - start < howlong:
        pass