import io

import pytest

from osdemos.pstack import PersistentStack, create_image, main, run_commands


@pytest.fixture
def image(tmp_path):
    return create_image(tmp_path / "ps.img", 4096)


def test_worked_example_persists_across_runs(image):
    out = io.StringIO()
    assert run_commands(image, ["7", "13", "47", "pop"], out) == [47]
    assert run_commands(image, ["pop", "pop", "99"], out) == [13, 7]
    assert run_commands(image, ["pop"], out) == [99]
    assert out.getvalue().split() == ["47", "13", "7", "99"]


def test_pop_on_empty_is_ignored(image):
    assert run_commands(image, ["pop", "pop"], io.StringIO()) == []


def test_non_numeric_pushes_zero(image):
    assert run_commands(image, ["abc", "pop"], io.StringIO()) == [0]


def test_file_layout(image):
    with PersistentStack(image) as stack:
        stack.push(7)
    data = image.read_bytes()
    assert data[:8] == (1).to_bytes(8, "little")
    assert data[8:12] == (7).to_bytes(4, "little", signed=True)


def test_push_pop_roundtrip(image):
    with PersistentStack(image) as stack:
        stack.push(-5)
        stack.push(2**31 - 1)
        assert len(stack) == 2
        assert stack.pop() == 2**31 - 1
        assert stack.pop() == -5
        assert len(stack) == 0


def test_pop_empty_raises(image):
    with PersistentStack(image) as stack:
        with pytest.raises(IndexError):
            stack.pop()


def test_full_stack(tmp_path):
    path = create_image(tmp_path / "small.img", 8 + 4 * 3)
    with PersistentStack(path) as stack:
        for value in range(stack.capacity):
            stack.push(value)
        assert len(stack) == stack.capacity == 3
        with pytest.raises(IndexError):
            stack.push(99)
    assert run_commands(path, ["100", "pop"], io.StringIO()) == [2]


def test_push_out_of_range_raises(image):
    with PersistentStack(image) as stack:
        with pytest.raises(OverflowError):
            stack.push(2**31)


@pytest.mark.parametrize("size", [4, 4098])
def test_bad_image_size(tmp_path, size):
    path = create_image(tmp_path / "bad.img", size)
    with pytest.raises(ValueError):
        PersistentStack(path)


def test_main_uses_image_in_cwd(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    create_image(tmp_path / "ps.img")
    assert main(["3", "4", "pop"]) == 0
    assert capsys.readouterr().out.split() == ["4"]


def test_main_missing_image(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["pop"]) == 1