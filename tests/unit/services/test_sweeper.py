from unittest.mock import MagicMock

import pytest

from metrics_sink.domain.errors import StorageError
from metrics_sink.services.sweeper import RetentionSweeper


class TestRetentionSweeper:
    """Test retention-based snapshot expiry."""

    def test_deletes_strictly_older_than_cutoff(self, store, make_snapshot):
        for ts in (1000, 1999, 2000, 2001, 5000):
            store.write(make_snapshot(ts))

        result = RetentionSweeper(store).sweep(now=5000, retention_millis=3000)

        assert result.cutoff == 2000
        assert sorted(result.deleted) == [1000, 1999]
        # exactly on the cutoff is retained
        assert store.list_all() == {2000, 2001, 5000}

    def test_nothing_expired(self, store, make_snapshot):
        store.write(make_snapshot(1000))
        store.write(make_snapshot(2000))

        result = RetentionSweeper(store).sweep(now=3000, retention_millis=5000)

        assert result.deleted == []
        assert store.list_all() == {1000, 2000}

    def test_zero_retention_keeps_only_current_and_newer(self, store, make_snapshot):
        for ts in (1000, 3000, 4000):
            store.write(make_snapshot(ts))

        RetentionSweeper(store).sweep(now=3000, retention_millis=0)

        assert store.list_all() == {3000, 4000}

    def test_zero_padded_stray_left_alone(self, store, make_snapshot):
        store.write(make_snapshot(5000))
        stray = store.directory / "0500"
        stray.write_text("{}", encoding="utf-8")

        result = RetentionSweeper(store).sweep(now=5000, retention_millis=1000)

        assert result.deleted == []
        assert stray.exists()
        assert store.list_all() == {5000}

    def test_negative_retention_rejected(self, store):
        with pytest.raises(ValueError):
            RetentionSweeper(store).sweep(now=3000, retention_millis=-1)

    def test_delete_failure_does_not_block_remaining(self, sample_value):
        store = MagicMock()
        store.list_all.return_value = {100, 200, 300}

        def delete(ts):
            if ts == 200:
                raise StorageError("busy")
            return True

        store.delete.side_effect = delete
        before = sample_value("metrics_sink_snapshot_delete_failures_total")

        result = RetentionSweeper(store).sweep(now=1000, retention_millis=0)

        assert sorted(result.deleted) == [100, 300]
        assert list(result.failures) == [200]
        assert store.delete.call_count == 3
        after = sample_value("metrics_sink_snapshot_delete_failures_total")
        assert after - before == 1

    def test_list_failure_propagates(self):
        store = MagicMock()
        store.list_all.side_effect = StorageError("gone")

        with pytest.raises(StorageError):
            RetentionSweeper(store).sweep(now=1000, retention_millis=0)
