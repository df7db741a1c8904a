import pytest
from datetime import datetime
from pathlib import Path
from card_importer.models import CameraFile
from card_importer.organization.directories import (
    DirectoryCache,
    SessionDirectoryResolver,
    SessionState,
)


def cf(ts: datetime, name: str = "IMG.JPG") -> CameraFile:
    return CameraFile(path=Path("/card/DCIM/100CANON") / name, timestamp=ts)


class CountingResolver(SessionDirectoryResolver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookups = []

    def directory_for(self, base_path, timestamp):
        self.lookups.append(timestamp)
        return super().directory_for(base_path, timestamp)


def test_session_across_midnight_stays_in_first_day(archive):
    resolver = SessionDirectoryResolver()
    state = SessionState()

    d1 = resolver.assign_directory(archive, cf(datetime(2024, 3, 1, 23, 58)), state)
    d2 = resolver.assign_directory(archive, cf(datetime(2024, 3, 2, 0, 10)), state)

    assert d1 == d2 == archive / "2024-03-01"
    assert not (archive / "2024-03-02").exists()


def test_long_gap_recomputes_directory_same_day(archive):
    resolver = CountingResolver()
    state = SessionState()

    d1 = resolver.assign_directory(archive, cf(datetime(2024, 3, 1, 10, 0)), state)
    d2 = resolver.assign_directory(archive, cf(datetime(2024, 3, 1, 20, 0)), state)

    assert len(resolver.lookups) == 2
    assert d1 == d2 == archive / "2024-03-01"


def test_long_gap_moves_to_new_day(archive):
    resolver = SessionDirectoryResolver()
    state = SessionState()

    resolver.assign_directory(archive, cf(datetime(2024, 3, 1, 20, 0)), state)
    d2 = resolver.assign_directory(archive, cf(datetime(2024, 3, 2, 8, 0)), state)

    assert d2 == archive / "2024-03-02"


def test_gap_equal_to_threshold_keeps_session(archive):
    resolver = SessionDirectoryResolver(minimum_day_break=14400)
    state = SessionState()

    resolver.assign_directory(archive, cf(datetime(2024, 3, 1, 22, 0)), state)
    d2 = resolver.assign_directory(archive, cf(datetime(2024, 3, 2, 2, 0)), state)

    assert d2 == archive / "2024-03-01"


def test_last_timestamp_tracks_every_file(archive):
    resolver = SessionDirectoryResolver()
    state = SessionState()

    # Each gap is under 4 hours, so the chain never breaks.
    for hour in (18, 21, 0, 3):
        day = 1 if hour >= 18 else 2
        d = resolver.assign_directory(archive, cf(datetime(2024, 3, day, hour, 0)), state)

    assert d == archive / "2024-03-01"
    assert state.last_timestamp == datetime(2024, 3, 2, 3, 0)


def test_fresh_state_always_resolves():
    state = SessionState()
    assert state.current_directory is None
    assert state.last_timestamp == datetime.min


def test_directory_for_is_idempotent(archive):
    resolver = SessionDirectoryResolver()

    a = resolver.directory_for(archive, datetime(2024, 1, 5, 8, 0))
    b = resolver.directory_for(archive, datetime(2024, 1, 5, 23, 0))

    assert a == b == archive / "2024-01-05"
    assert [p.name for p in archive.iterdir()] == ["2024-01-05"]
    assert len(resolver.cache) == 1


def test_directory_for_finds_described_directory(archive):
    existing = archive / "2024-01-05 Beach day"
    existing.mkdir()

    d = SessionDirectoryResolver().directory_for(archive, datetime(2024, 1, 5, 8, 0))

    assert d == existing
    assert not (archive / "2024-01-05").exists()


def test_directory_for_finds_year_nested_directory(archive):
    nested = archive / "2023" / "2023-12-31 NYE"
    nested.mkdir(parents=True)

    d = SessionDirectoryResolver().directory_for(archive, datetime(2023, 12, 31, 22, 0))

    assert d == nested


def test_directory_for_dry_run_creates_nothing(archive):
    d = SessionDirectoryResolver(dry_run=True).directory_for(archive, datetime(2024, 1, 5))

    assert d == archive / "2024-01-05"
    assert list(archive.iterdir()) == []


def test_cache_is_keyed_by_base_path(tmp_path):
    main = tmp_path / "main"
    bak = tmp_path / "bak"
    main.mkdir()
    bak.mkdir()
    (bak / "2024-01-05 described").mkdir()
    resolver = SessionDirectoryResolver()

    assert resolver.directory_for(main, datetime(2024, 1, 5)) == main / "2024-01-05"
    assert resolver.directory_for(bak, datetime(2024, 1, 5)) == bak / "2024-01-05 described"


def test_cache_hit_skips_filesystem(archive):
    cache = DirectoryCache()
    planned = archive / "somewhere-else"
    cache.put(archive, "2024-01-05", planned)

    d = SessionDirectoryResolver(cache=cache).directory_for(archive, datetime(2024, 1, 5))

    assert d == planned
    assert not planned.exists()
