import errno
import os
from pathlib import Path

import pytest

from logroll.io import move as move_mod
from logroll.io.move import file_digest, move_file, same_file


def _cross_device(monkeypatch: pytest.MonkeyPatch, source: Path):
    """Make os.replace fail with EXDEV for *source* only, like a mount boundary."""
    real_replace = os.replace

    def fake_replace(src, dst):  # noqa: ANN001 - signature must match os.replace
        if Path(src) == source:
            raise OSError(errno.EXDEV, "Invalid cross-device link", str(src))
        return real_replace(src, dst)

    monkeypatch.setattr(os, "replace", fake_replace)


def test_same_volume_rename(tmp_path: Path):
    src = tmp_path / "a.log"
    dst = tmp_path / "a.log.1"
    src.write_bytes(b"hello\n")

    assert move_file(src, dst) == "rename"
    assert not src.exists()
    assert dst.read_bytes() == b"hello\n"


def test_existing_target_is_overwritten(tmp_path: Path):
    src = tmp_path / "a.log"
    dst = tmp_path / "a.log.1"
    src.write_bytes(b"new\n")
    dst.write_bytes(b"old content that is longer\n")

    move_file(src, dst)
    assert dst.read_bytes() == b"new\n"


def test_missing_source_raises_and_creates_nothing(tmp_path: Path):
    dst = tmp_path / "out" / "x.log.1"
    with pytest.raises(FileNotFoundError):
        move_file(tmp_path / "missing.log", dst)
    assert not dst.exists()
    assert not dst.parent.exists()


def test_creates_missing_target_dirs(tmp_path: Path):
    src = tmp_path / "a.log"
    src.write_bytes(b"x")
    dst = tmp_path / "archive" / "2024" / "a.log.1"

    move_file(src, dst)
    assert dst.read_bytes() == b"x"


def test_missing_target_dir_fails_when_creation_disabled(tmp_path: Path):
    src = tmp_path / "a.log"
    src.write_bytes(b"x")
    with pytest.raises(OSError):
        move_file(src, tmp_path / "nope" / "a.log.1", create_dirs=False)
    assert src.exists()


def test_cross_device_falls_back_to_copy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    src = tmp_path / "a.log"
    dst = tmp_path / "other" / "a.log.1"
    payload = b"line\n" * 5000
    src.write_bytes(payload)
    _cross_device(monkeypatch, src)

    assert move_file(src, dst) == "copy"
    assert not src.exists()
    assert dst.read_bytes() == payload
    # No temp copies left next to the target
    assert [p.name for p in dst.parent.iterdir()] == ["a.log.1"]


def test_cross_device_overwrites_existing_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    src = tmp_path / "a.log"
    dst = tmp_path / "other" / "a.log.1"
    dst.parent.mkdir()
    dst.write_bytes(b"stale rotation from last week, much longer than the new one\n")
    src.write_bytes(b"fresh\n")
    _cross_device(monkeypatch, src)

    assert move_file(src, dst) == "copy"
    assert not src.exists()
    assert dst.read_bytes() == b"fresh\n"
    assert [p.name for p in dst.parent.iterdir()] == ["a.log.1"]


def test_cross_device_keeps_source_when_verification_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    src = tmp_path / "a.log"
    dst = tmp_path / "a.log.1"
    src.write_bytes(b"precious\n")
    _cross_device(monkeypatch, src)

    real_digest = move_mod.file_digest
    calls = {"n": 0}

    def corrupting_digest(path):  # noqa: ANN001
        calls["n"] += 1
        if calls["n"] == 2:  # the copy
            return "0" * 64, 1
        return real_digest(path)

    monkeypatch.setattr(move_mod, "file_digest", corrupting_digest)

    with pytest.raises(OSError) as ei:
        move_file(src, dst)
    assert ei.value.errno == errno.EIO
    assert src.read_bytes() == b"precious\n"
    assert not dst.exists()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.log"]


def test_non_exdev_errors_propagate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    src = tmp_path / "a.log"
    src.write_bytes(b"x")

    def denied(src_, dst_):  # noqa: ANN001
        raise PermissionError(errno.EACCES, "denied")

    monkeypatch.setattr(os, "replace", denied)
    with pytest.raises(PermissionError):
        move_file(src, tmp_path / "b.log")
    assert src.exists()


def test_file_digest_and_same_file(tmp_path: Path):
    p = tmp_path / "d.bin"
    p.write_bytes(b"abc")
    digest, size = file_digest(p)
    assert size == 3
    assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    assert same_file(p, tmp_path / "." / "d.bin")
    assert not same_file(p, tmp_path / "e.bin")
