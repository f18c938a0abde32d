from datetime import UTC, datetime

import pytest

from wrestlequest.kb import default_progress
from wrestlequest.storage.dynamo_local import DynamoLocalStorage, _convert_decimals, _convert_floats
from wrestlequest.storage.memory import InMemoryStorage

from tests.conftest import TECHNIQUE, make_progress


class TestInMemoryStorage:
    def test_missing_document(self):
        storage = InMemoryStorage()
        snapshot = storage.get_snapshot("nobody")
        assert snapshot.exists is False
        assert snapshot.revision == 0
        assert storage.get_user_progress("nobody") is None

    def test_revision_increments(self):
        storage = InMemoryStorage()
        assert storage.save_user_progress("u1", default_progress()) == 1
        assert storage.save_user_progress("u1", default_progress()) == 2
        assert storage.save_user_progress("u2", default_progress()) == 1

    def test_round_trip_drops_leveling_flag(self):
        storage = InMemoryStorage()
        progress = make_progress(TECHNIQUE, points=3, total_points=8, rank=2, xp=400,
                                 last_activity_date=datetime(2026, 3, 2, 18, tzinfo=UTC))
        skills = list(progress.skills)
        skills[TECHNIQUE] = skills[TECHNIQUE].model_copy(update={"is_leveling_up": True})
        storage.save_user_progress("u1", progress.model_copy(update={"skills": skills}))
        loaded = storage.get_user_progress("u1")
        assert loaded.skills[TECHNIQUE].total_points == 8
        assert loaded.skills[TECHNIQUE].is_leveling_up is False
        assert loaded.last_activity_date == datetime(2026, 3, 2, 18, tzinfo=UTC)

    def test_snapshot_is_a_copy(self):
        storage = InMemoryStorage()
        storage.save_user_progress("u1", default_progress())
        storage.get_snapshot("u1").document["xp"] = 999
        assert storage.get_user_progress("u1").xp == 0

    def test_subscribe_delivers_current_then_changes(self):
        storage = InMemoryStorage()
        seen = []
        sub = storage.subscribe("u1", seen.append)
        storage.save_user_progress("u1", default_progress())
        storage.save_user_progress("u2", default_progress())
        assert [s.revision for s in seen] == [0, 1]
        assert seen[0].exists is False
        sub.close()
        storage.save_user_progress("u1", default_progress())
        assert len(seen) == 2

    def test_close_twice(self):
        storage = InMemoryStorage()
        sub = storage.subscribe("u1", lambda s: None)
        sub.close()
        sub.close()
        assert sub.closed


class TestDecimalConversion:
    def test_round_trip_numbers(self):
        data = {"xp": 550, "ratio": 0.5, "skills": [{"points": 3}]}
        assert _convert_decimals(_convert_floats(data)) == data


@pytest.fixture
def dynamo():
    """Requires DynamoDB Local running on localhost:8000."""
    try:
        s = DynamoLocalStorage(table_name="UserProgressTest")
        return s
    except Exception:
        pytest.skip("DynamoDB Local not available")


@pytest.mark.integration
class TestDynamoRoundTrips:
    def test_save_and_load(self, dynamo):
        progress = make_progress(TECHNIQUE, points=2, total_points=12, rank=3, xp=600, level=2)
        revision = dynamo.save_user_progress("storage-test-1", progress)
        loaded = dynamo.get_user_progress("storage-test-1")
        assert revision >= 1
        assert loaded.skills[TECHNIQUE].rank == 3
        assert loaded.xp == 600

    def test_not_found(self, dynamo):
        snapshot = dynamo.get_snapshot("storage-nonexistent")
        assert snapshot.exists is False
        assert dynamo.get_user_progress("storage-nonexistent") is None

    def test_revision_is_monotonic(self, dynamo):
        first = dynamo.save_user_progress("storage-test-2", default_progress())
        second = dynamo.save_user_progress("storage-test-2", default_progress())
        assert second == first + 1

    def test_poll_fans_out_foreign_writes(self, dynamo):
        other = DynamoLocalStorage(table_name="UserProgressTest")
        seen = []
        dynamo.subscribe("storage-test-3", seen.append)
        other.save_user_progress("storage-test-3", make_progress(xp=250))
        assert dynamo.poll("storage-test-3") is True
        assert seen[-1].document["xp"] == 250
        assert dynamo.poll("storage-test-3") is False
