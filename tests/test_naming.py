"""
Tests for backup file naming
"""

import os
from datetime import datetime, timezone

import pytest

from rotating_sink import Clock
from rotating_sink.errors import BackupNameMismatch
from rotating_sink.naming import (
    backup_name,
    backup_time,
    parse_backup_time,
    split_name,
)

ROTATED_AT = datetime(2016, 11, 4, 18, 30, 0, tzinfo=timezone.utc)


class TestBackupName:
    def test_timestamp_between_name_and_extension(self):
        name = backup_name("/var/log/foo/server.log", ROTATED_AT)

        assert name == "/var/log/foo/server-2016-11-04T18-30-00.log"

    def test_without_extension(self):
        name = backup_name("/var/log/server", ROTATED_AT)

        assert name == "/var/log/server-2016-11-04T18-30-00"

    def test_explicit_extension(self):
        name = backup_name("/var/log/app.2024.log", ROTATED_AT, ".2024.log")

        assert name == "/var/log/app-2016-11-04T18-30-00.2024.log"

    def test_names_sort_in_time_order(self):
        times = [
            datetime(2016, 11, 4, 9, 5, 1, tzinfo=timezone.utc),
            datetime(2016, 11, 4, 18, 30, 0, tzinfo=timezone.utc),
            datetime(2017, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
        ]
        names = [backup_name("app.log", t) for t in reversed(times)]

        assert sorted(names) == [backup_name("app.log", t) for t in times]

    def test_split_name(self):
        assert split_name("/tmp/app.log") == ("app-", ".log")
        assert split_name("/tmp/app") == ("app-", "")
        assert split_name("/tmp/app.tar.gz", ".tar.gz") == ("app-", ".tar.gz")


class TestParseBackupTime:
    def test_round_trip_utc(self):
        clock = Clock(local=False)
        path = backup_name("/var/log/app.log", ROTATED_AT)

        parsed = parse_backup_time(os.path.basename(path), "app-", ".log", clock)

        assert parsed == ROTATED_AT

    def test_round_trip_local(self):
        clock = Clock(local=True)
        rotated = clock.localize(datetime(2020, 6, 15, 13, 45, 12))
        path = backup_name("/var/log/app.log", rotated)

        parsed = parse_backup_time(os.path.basename(path), "app-", ".log", clock)

        assert parsed == rotated

    def test_round_trip_drops_subseconds(self):
        rotated = ROTATED_AT.replace(microsecond=999999)
        path = backup_name("app.log", rotated)

        assert parse_backup_time(path, "app-", ".log") == ROTATED_AT

    def test_mismatched_prefix(self):
        with pytest.raises(BackupNameMismatch, match="prefix"):
            parse_backup_time("other-2016-11-04T18-30-00.log", "app-", ".log")

    def test_mismatched_extension(self):
        with pytest.raises(BackupNameMismatch, match="extension"):
            parse_backup_time("app-2016-11-04T18-30-00.txt", "app-", ".log")

    def test_invalid_timestamp(self):
        with pytest.raises(BackupNameMismatch):
            parse_backup_time("app-yesterday.log", "app-", ".log")

    def test_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_backup_time("app.log", "app-", ".log")


class TestBackupTime:
    def test_plain_backup(self):
        assert backup_time("app-2016-11-04T18-30-00.log", "app-", ".log") == ROTATED_AT

    def test_compressed_backup(self):
        assert (
            backup_time("app-2016-11-04T18-30-00.log.gz", "app-", ".log") == ROTATED_AT
        )

    @pytest.mark.parametrize(
        "filename",
        [
            "app.log",
            "app-notes.log",
            "app-2016-11-04T18-30-00.log.bak",
            "other-2016-11-04T18-30-00.log",
            "README",
        ],
    )
    def test_unrelated_files(self, filename):
        assert backup_time(filename, "app-", ".log") is None
