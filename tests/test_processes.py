import os

from osdemos import processes


def test_fork_hello_parent_and_child_greet(tmp_path):
    log = tmp_path / "out.txt"
    with open(log, "a") as out:
        child = processes.fork_hello(out=out)
    lines = log.read_text().splitlines()
    pid = os.getpid()
    assert child > 0
    assert lines[0] == f"hello world (pid:{pid})"
    assert sorted(lines[1:]) == sorted([
        f"hello, I am child (pid:{child})",
        f"hello, I am parent of {child} (pid:{pid})",
    ])


def test_fork_wait_parent_prints_last(tmp_path):
    log = tmp_path / "out.txt"
    with open(log, "a") as out:
        child = processes.fork_wait(out=out)
    lines = log.read_text().splitlines()
    pid = os.getpid()
    assert lines == [
        f"hello world (pid:{pid})",
        f"hello, I am child (pid:{child})",
        f"hello, I am parent of {child} (wc:{child}) (pid:{pid})",
    ]


def _counts(content):
    return [content.count("\n"), len(content.split()), len(content.encode())]


def test_fork_exec_wc_runs_word_count(tmp_path, capfd):
    target = tmp_path / "sample.txt"
    content = "one two\nthree four five\nsix\n"
    target.write_text(content)
    log = tmp_path / "out.txt"
    with open(log, "a") as out:
        child = processes.fork_exec_wc(target, out=out)
    lines = log.read_text().splitlines()
    pid = os.getpid()
    assert lines == [
        f"hello world (pid:{pid})",
        f"hello, I am child (pid:{child})",
        f"hello, I am parent of {child} (wc:{child}) (pid:{pid})",
    ]
    wc_line = capfd.readouterr().out.strip().splitlines()[-1]
    fields = wc_line.split()
    assert [int(f) for f in fields[:3]] == _counts(content)
    assert fields[3] == str(target)


def test_fork_redirect_wc_writes_output_file(tmp_path):
    target = tmp_path / "data.txt"
    content = "alpha beta\ngamma\n"
    target.write_text(content)
    output = tmp_path / "p4.output"
    output.write_text("stale contents that must be truncated\n" * 5)
    code = processes.fork_redirect_wc(target, output)
    assert code == 0
    fields = output.read_text().split()
    assert [int(f) for f in fields[:3]] == _counts(content)
    assert fields[3] == str(target)
    assert len(fields) == 4


def test_fork_redirect_wc_file_permissions(tmp_path):
    target = tmp_path / "data.txt"
    target.write_text("x\n")
    output = tmp_path / "fresh.output"
    processes.fork_redirect_wc(target, output)
    mode = output.stat().st_mode & 0o777
    assert mode & ~0o644 == 0
    assert output.read_text().split()[0] == "1"