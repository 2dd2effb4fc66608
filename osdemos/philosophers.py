"""The dining philosophers, with and without the fork ordering that avoids deadlock."""

import sys
import threading

NUM_PHILOSOPHERS = 5


def left(p):
    """Index of the fork on philosopher ``p``'s left."""
    return p % NUM_PHILOSOPHERS


def right(p):
    """Index of the fork on philosopher ``p``'s right."""
    return (p + 1) % NUM_PHILOSOPHERS


def fork_order(p, avoid_deadlock=False):
    """Return the two forks philosopher ``p`` picks up, in the order taken.

    To break the cycle, the last philosopher takes the right fork first when
    ``avoid_deadlock`` is set.
    """
    if avoid_deadlock and p == NUM_PHILOSOPHERS - 1:
        return right(p), left(p)
    return left(p), right(p)


def dine(num_loops, avoid_deadlock=False, verbose=False, out=None, timeout=None):
    """Run five philosophers for ``num_loops`` meals each.

    Without ``timeout`` a deadlock blocks forever. With it, a philosopher
    that waits longer than ``timeout`` seconds for a fork reports the
    deadlock, puts down what it holds and stops. Returns True when every
    philosopher finished all its meals.
    """
    out = sys.stdout if out is None else out
    forks = [threading.Semaphore(1) for _ in range(NUM_PHILOSOPHERS)]
    print_lock = threading.Lock()
    finished = [False] * NUM_PHILOSOPHERS

    def write(p, text):
        with print_lock:
            out.write(" " * (p * 10) + text + "\n")

    def say(p, text):
        if verbose:
            write(p, text)

    def try_label(p, fork):
        if not avoid_deadlock:
            return f"{p}: try {fork}"
        if p == NUM_PHILOSOPHERS - 1:
            return f"{p} try {fork}"
        return f"try {fork}"

    def philosopher(p):
        first, second = fork_order(p, avoid_deadlock)
        say(p, f"{p}: start")
        for _ in range(num_loops):
            say(p, f"{p}: think")
            say(p, try_label(p, first))
            if not forks[first].acquire(timeout=timeout):
                write(p, f"{p}: gave up on fork {first} (deadlock)")
                return
            say(p, try_label(p, second))
            if not forks[second].acquire(timeout=timeout):
                forks[first].release()
                write(p, f"{p}: gave up on fork {second} (deadlock)")
                return
            say(p, f"{p}: eat")
            forks[left(p)].release()
            forks[right(p)].release()
            say(p, f"{p}: done")
        finished[p] = True

    out.write("dining: started\n")
    threads = [
        threading.Thread(target=philosopher, args=(p,), daemon=True)
        for p in range(NUM_PHILOSOPHERS)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    out.write("dining: finished\n")
    return all(finished)