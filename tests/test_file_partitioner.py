"""Tests for chunker.file_partitioner."""

import os

import pytest

from chunker.file_partitioner import chunk_count, partition
from common.exceptions import ShortReadError


@pytest.mark.parametrize('size,buffer_size', [
    (1, 4), (3, 4), (4, 4), (5, 4), (8, 4), (9, 4), (1000, 7), (4096, 4096), (4097, 4096),
])
def test_chunks_sum_to_file_size(make_file, size, buffer_size):
    path = make_file(size)

    chunks = partition(path, buffer_size)

    assert sum(c.size for c in chunks) == size
    assert all(c.size == buffer_size for c in chunks[:-1])
    assert 0 < chunks[-1].size <= buffer_size
    assert b''.join(c.data for c in chunks) == path.read_bytes()


def test_indexes_are_ordered_and_total_is_shared(make_file):
    chunks = partition(make_file(10), 4)

    assert [c.index for c in chunks] == [0, 1, 2]
    assert [c.position for c in chunks] == [1, 2, 3]
    assert {c.total for c in chunks} == {3}


def test_exact_buffer_size_yields_one_chunk(make_file):
    chunks = partition(make_file(16), 16)

    assert len(chunks) == 1
    assert chunks[0].size == 16


def test_one_byte_over_yields_two_chunks(make_file):
    chunks = partition(make_file(17), 16)

    assert [c.size for c in chunks] == [16, 1]


def test_empty_file_yields_no_chunks(make_file):
    assert partition(make_file(0), 16) == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        partition(tmp_path / 'missing.bin', 16)


def test_directory_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        partition(tmp_path, 16)


@pytest.mark.skipif(os.name != 'posix' or os.geteuid() == 0, reason='requires non-root POSIX permissions')
def test_unreadable_file_raises_permission_error(make_file):
    path = make_file(8)
    path.chmod(0)
    try:
        with pytest.raises(PermissionError):
            partition(path, 4)
    finally:
        path.chmod(0o600)


@pytest.mark.parametrize('buffer_size', [0, -1])
def test_non_positive_buffer_size_rejected(make_file, buffer_size):
    with pytest.raises(ValueError):
        partition(make_file(8), buffer_size)


def test_short_read_is_fatal(make_file, monkeypatch):
    path = make_file(8)
    real_fstat = os.fstat

    class Stat:
        def __init__(self, st):
            self.st_size = st.st_size + 4

    monkeypatch.setattr('chunker.file_partitioner.os.fstat', lambda fd: Stat(real_fstat(fd)))

    with pytest.raises(ShortReadError):
        partition(path, 4)


def test_short_read_error_is_an_os_error():
    assert issubclass(ShortReadError, OSError)


@pytest.mark.parametrize('total,buffer_size,expected', [
    (0, 4, 0), (1, 4, 1), (4, 4, 1), (5, 4, 2), (50, 24, 3),
])
def test_chunk_count(total, buffer_size, expected):
    assert chunk_count(total, buffer_size) == expected


def test_fifty_mib_file_at_twenty_four_mib(make_file):
    mib = 1024 * 1024
    chunks = partition(make_file(50 * mib), 24 * mib)

    assert [c.size for c in chunks] == [24 * mib, 24 * mib, 2 * mib]
