import tarfile

import pytest

from tarsplit.libs.tar_archive import ArchiveIOError, entry_footprint, iter_entries
from tarsplit.services import ChunkWriter

from .conftest import payload_for, read_archive


def split(source, target, max_chunk_size, entries=None):
    writer = ChunkWriter(target, "split", "source", max_chunk_size)
    return writer.write(entries if entries is not None else iter_entries(source))


def chunk_footprint(path):
    return sum(entry_footprint(size) for _, size, _ in read_archive(path))


def test_entries_are_grouped_until_the_maximum(make_archive, target_dir):
    members = [(f"file_{i:02d}.bin", payload_for(i, 1000)) for i in range(10)]
    source = make_archive(members=members)

    paths = split(source, target_dir, 4000)

    assert [p.name for p in paths] == [f"split_source_{i}.tar" for i in range(5)]
    assert [len(read_archive(p)) for p in paths] == [2, 2, 2, 2, 2]
    assert all(chunk_footprint(p) <= 4000 for p in paths)


def test_chunks_reproduce_source_entries_in_order(make_archive, target_dir):
    members = [(f"dir/file_{i}.bin", payload_for(i, 700 * i)) for i in range(12)]
    source = make_archive(members=members, directories=["dir"])

    paths = split(source, target_dir, 6000)

    assert len(paths) > 1
    combined = [item for path in paths for item in read_archive(path)]
    assert combined == read_archive(source)


def test_every_chunk_is_a_terminated_archive(make_archive, target_dir):
    members = [(f"file_{i}.bin", payload_for(i, 3000)) for i in range(6)]
    source = make_archive(members=members)

    paths = split(source, target_dir, 8000)

    for path in paths:
        with tarfile.open(path, "r:") as archive:
            names = archive.getnames()
        assert names
        assert path.stat().st_size % tarfile.RECORDSIZE == 0


def test_oversized_entry_is_written_alone(make_archive, target_dir):
    members = [
        ("small_a.bin", payload_for(0, 1000)),
        ("huge.bin", payload_for(1, 5000)),
        ("small_b.bin", payload_for(2, 1000)),
    ]
    source = make_archive(members=members)

    paths = split(source, target_dir, 4000)

    assert [[name for name, _, _ in read_archive(p)] for p in paths] == [
        ["small_a.bin"],
        ["huge.bin"],
        ["small_b.bin"],
    ]
    assert chunk_footprint(paths[1]) > 4000


def test_oversized_first_entry_starts_first_chunk(make_archive, target_dir):
    members = [("huge.bin", payload_for(0, 5000)), ("small.bin", payload_for(1, 100))]
    source = make_archive(members=members)

    paths = split(source, target_dir, 2048)

    assert [len(read_archive(p)) for p in paths] == [1, 1]


def test_entry_that_exactly_fills_chunk_stays(make_archive, target_dir):
    members = [(f"file_{i}.bin", payload_for(i, 512)) for i in range(4)]
    source = make_archive(members=members)

    paths = split(source, target_dir, 2048)

    assert [len(read_archive(p)) for p in paths] == [2, 2]


def test_empty_source_produces_one_empty_chunk(make_archive, target_dir):
    source = make_archive()

    paths = split(source, target_dir, 2048)

    assert [p.name for p in paths] == ["split_source_0.tar"]
    assert read_archive(paths[0]) == []


def test_failure_keeps_sealed_chunks_and_drops_partial_one(make_archive, target_dir):
    members = [(f"file_{i}.bin", payload_for(i, 1000)) for i in range(3)]
    source = make_archive(members=members)

    def failing_entries():
        for index, entry in enumerate(iter_entries(source)):
            if index == 2:
                raise ArchiveIOError("disk full")
            yield entry

    writer = ChunkWriter(target_dir, "split", "source", 2000)
    with pytest.raises(ArchiveIOError):
        writer.write(failing_entries())

    assert writer.state.sealed_paths == [target_dir / "split_source_0.tar"]
    assert read_archive(target_dir / "split_source_0.tar")[0][0] == "file_0.bin"
    assert not (target_dir / "split_source_1.tar").exists()


def test_state_tracks_final_chunk(make_archive, target_dir):
    members = [(f"file_{i}.bin", payload_for(i, 100)) for i in range(3)]
    source = make_archive(members=members)

    writer = ChunkWriter(target_dir, "p", "source", 2048)
    writer.write(iter_entries(source))

    assert writer.state.index == 1
    assert writer.state.entry_count == 1
    assert writer.state.accumulated_size == 1024
    assert writer.state.total_entries == 3
    assert writer.chunk_path(1) == target_dir / "p_source_1.tar"
