"""Lottery scheduling over a list of jobs holding tickets."""

import random
import sys


class LotteryScheduler:
    """Jobs held in a list, newest first, each with a number of tickets."""

    def __init__(self):
        self._jobs = []

    def insert(self, tickets):
        """Add a job at the front of the list."""
        self._jobs.insert(0, tickets)

    @property
    def total_tickets(self):
        return sum(self._jobs)

    def pick(self, winner):
        """Return the tickets of the job holding the winning ticket number."""
        if not 0 <= winner < self.total_tickets:
            raise ValueError(f"winning ticket {winner} out of range")
        counter = 0
        for tickets in self._jobs:
            counter += tickets
            if counter > winner:
                return tickets
        raise ValueError(f"winning ticket {winner} out of range")

    def draw(self, rng):
        """Draw a winning ticket; return (winner, tickets of winning job)."""
        total = self.total_tickets
        if total <= 0:
            raise ValueError("no tickets to draw from")
        winner = rng.randrange(total)
        return winner, self.pick(winner)

    def format_list(self):
        return "List: " + "".join(f"[{tickets}] " for tickets in self._jobs)


def run_lottery(seed, loops, out=None):
    """Run the lottery demo; return the list of (winner, tickets) draws."""
    out = sys.stdout if out is None else out
    rng = random.Random(seed)
    scheduler = LotteryScheduler()
    for tickets in (50, 100, 25):
        scheduler.insert(tickets)
    print(scheduler.format_list(), file=out)

    results = []
    for _ in range(loops):
        winner, tickets = scheduler.draw(rng)
        print(scheduler.format_list(), file=out)
        print(f"winner: {winner} {tickets}\n", file=out)
        results.append((winner, tickets))
    return results


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if len(args) != 2:
            raise ValueError
        seed, loops = int(args[0]), int(args[1])
    except ValueError:
        print("usage: lottery <seed> <loops>", file=sys.stderr)
        return 1
    run_lottery(seed, loops)
    return 0