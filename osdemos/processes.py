"""Process creation: fork, wait, exec and output redirection."""

import os
import sys

DEFAULT_REDIRECT = "./p4.output"


def _flush_all(out):
    out.flush()
    sys.stdout.flush()
    sys.stderr.flush()


def _run_child(action):
    """Run ``action`` in the forked child and leave the process, never returning."""
    status = 0
    try:
        action()
    except BaseException:
        status = 1
    os._exit(status)


def fork_hello(out=None):
    """Fork; parent and child each greet. Return the child's pid."""
    out = sys.stdout if out is None else out
    print(f"hello world (pid:{os.getpid()})", file=out)
    _flush_all(out)
    rc = os.fork()
    if rc == 0:
        def child():
            print(f"hello, I am child (pid:{os.getpid()})", file=out)
            out.flush()
        _run_child(child)
    print(f"hello, I am parent of {rc} (pid:{os.getpid()})", file=out)
    out.flush()
    # Reap the child so no zombie is left behind.
    os.waitpid(rc, 0)
    return rc


def fork_wait(out=None):
    """Fork; the parent waits for the child before greeting. Return the child's pid."""
    out = sys.stdout if out is None else out
    print(f"hello world (pid:{os.getpid()})", file=out)
    _flush_all(out)
    rc = os.fork()
    if rc == 0:
        def child():
            print(f"hello, I am child (pid:{os.getpid()})", file=out)
            out.flush()
            _sleep(1)
        _run_child(child)
    wc, _ = os.waitpid(rc, 0)
    print(f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})", file=out)
    out.flush()
    return rc


def _sleep(seconds):
    import time
    time.sleep(seconds)


def fork_exec_wc(path, out=None):
    """Fork; the child runs ``wc`` on ``path``, the parent waits. Return the child's pid."""
    out = sys.stdout if out is None else out
    print(f"hello world (pid:{os.getpid()})", file=out)
    _flush_all(out)
    rc = os.fork()
    if rc == 0:
        def child():
            print(f"hello, I am child (pid:{os.getpid()})", file=out)
            _flush_all(out)
            try:
                os.execvp("wc", ["wc", os.fspath(path)])
            except OSError:
                print("this shouldn't print out", end="", file=out)
                out.flush()
        _run_child(child)
    wc, _ = os.waitpid(rc, 0)
    print(f"hello, I am parent of {rc} (wc:{wc}) (pid:{os.getpid()})", file=out)
    out.flush()
    return rc


def fork_redirect_wc(path, output_path=DEFAULT_REDIRECT):
    """Fork; the child runs ``wc`` on ``path`` with its output sent to ``output_path``.

    Returns the child's exit code.
    """
    _flush_all(sys.stdout)
    rc = os.fork()
    if rc == 0:
        def child():
            fd = os.open(output_path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o644)
            os.dup2(fd, sys.stdout.fileno() if _has_fileno(sys.stdout) else 1)
            os.dup2(fd, 1)
            os.execvp("wc", ["wc", os.fspath(path)])
        _run_child(child)
    wc, status = os.waitpid(rc, 0)
    if wc < 0:
        raise ChildProcessError(f"wait failed for child {rc}")
    return os.waitstatus_to_exitcode(status)


def _has_fileno(stream):
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True