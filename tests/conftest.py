import io
import tarfile
from pathlib import Path
from typing import Iterable, Tuple

import pytest

import tarsplit.config as config_module


def build_archive(path: Path, members: Iterable[Tuple[str, bytes]], directories=()) -> Path:
    """Write a PAX tar archive with the given directories and file members."""
    with tarfile.open(path, "w", format=tarfile.PAX_FORMAT) as archive:
        for name in directories:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            archive.addfile(info)
        for name, payload in members:
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            archive.addfile(info, io.BytesIO(payload))
    return path


def read_archive(path: Path):
    """Return ``(name, size, payload)`` for every member of *path*."""
    result = []
    with tarfile.open(path, "r") as archive:
        for member in archive.getmembers():
            payload = None
            if member.isreg():
                payload = archive.extractfile(member).read()
            result.append((member.name, member.size, payload))
    return result


def payload_for(index: int, size: int) -> bytes:
    return bytes((index + offset) % 251 for offset in range(size))


@pytest.fixture
def make_archive(tmp_path):
    def _make(name="source.tar", members=(), directories=()):
        source_dir = tmp_path / "src"
        source_dir.mkdir(exist_ok=True)
        return build_archive(source_dir / name, members, directories)

    return _make


@pytest.fixture
def target_dir(tmp_path):
    target = tmp_path / "out"
    target.mkdir()
    return target


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def member_fields(path: Path):
    """Return the header fields of every member of *path*, in order."""
    with tarfile.open(path, "r") as archive:
        return [
            (
                member.name,
                member.type,
                member.mode,
                member.mtime,
                member.uid,
                member.gid,
                member.uname,
                member.gname,
                member.linkname,
                member.size,
            )
            for member in archive.getmembers()
        ]
