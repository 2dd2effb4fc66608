"""Command-line entry point running the demonstrations by name."""

import argparse
import sys

from osdemos import buffers, intro, lottery, philosophers, pstack, sema_demos, sync


def _build_parser():
    parser = argparse.ArgumentParser(prog="osdemos")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("throttle", help="limit concurrent children with a semaphore")
    p.add_argument("num_threads", type=int)
    p.add_argument("sem_value", type=int)
    p.add_argument("--delay", type=float, default=1.0)

    p = sub.add_parser("binary", help="count under a binary semaphore")
    p.add_argument("--loops", type=int, default=10_000_000)
    p.add_argument("--threads", type=int, default=2)

    p = sub.add_parser("sema-join", help="join a thread with a semaphore")
    p.add_argument("--delay", type=float, default=2.0)

    p = sub.add_parser("zemaphore", help="join a thread with a hand-built semaphore")
    p.add_argument("--delay", type=float, default=4.0)

    p = sub.add_parser("rwlock", help="reader and writer sharing a counter")
    p.add_argument("read_loops", type=int)
    p.add_argument("write_loops", type=int)

    p = sub.add_parser("dining", help="the dining philosophers")
    p.add_argument("num_loops", type=int)
    p.add_argument("--avoid-deadlock", action="store_true")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--timeout", type=float, default=None)

    p = sub.add_parser("pc", help="producer and consumers on a bounded buffer")
    p.add_argument("buffer_size", type=int)
    p.add_argument("loops", type=int)
    p.add_argument("consumers", type=int)
    p.add_argument("--mode", choices=[m.value for m in buffers.Mode],
                   default=buffers.Mode.COND_VAR.value)

    p = sub.add_parser("lottery", help="lottery scheduling")
    p.add_argument("seed", type=int)
    p.add_argument("loops", type=int)

    p = sub.add_parser("pstack", help="persistent stack in a mapped file")
    p.add_argument("commands", nargs="*")
    p.add_argument("--image", default=pstack.DEFAULT_IMAGE)

    sub.add_parser("cas", help="compare-and-swap")

    p = sub.add_parser("threads", help="two threads racing on a counter")
    p.add_argument("loops", type=int)
    return parser


def main(argv=None):
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else list(argv))
    try:
        if args.command == "throttle":
            sema_demos.throttle(args.num_threads, args.sem_value, args.delay)
        elif args.command == "binary":
            result = sema_demos.binary_counter(args.loops, args.threads)
            print(f"result: {result} (should be {args.loops * args.threads})")
        elif args.command == "sema-join":
            sema_demos.semaphore_join(args.delay)
        elif args.command == "zemaphore":
            sema_demos.zemaphore_join(args.delay)
        elif args.command == "rwlock":
            sema_demos.rwlock_demo(args.read_loops, args.write_loops)
        elif args.command == "dining":
            finished = philosophers.dine(args.num_loops, args.avoid_deadlock,
                                         args.verbose, timeout=args.timeout)
            if not finished:
                return 1
        elif args.command == "pc":
            buffers.run_producer_consumer(args.buffer_size, args.loops,
                                          args.consumers, args.mode)
        elif args.command == "lottery":
            lottery.run_lottery(args.seed, args.loops)
        elif args.command == "pstack":
            pstack.run_commands(args.image, args.commands)
        elif args.command == "cas":
            sync.cas_demo()
        elif args.command == "threads":
            intro.threaded_counter(args.loops)
    except (OSError, ValueError) as exc:
        print(f"osdemos {args.command}: {exc}", file=sys.stderr)
        return 1
    return 0