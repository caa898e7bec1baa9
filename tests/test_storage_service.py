# tests/test_storage_service.py

import os
import uuid
from unittest.mock import MagicMock

import pytest

from bowldem.services.storage_service import KeySpace, MemoryStore, MongoStore, initialize_storage_service


class TestKeySpace:

    def test_key_layout(self):
        keys = KeySpace('bowldem')
        assert keys.game('alice', '2026-02-01') == 'bowldem:game:alice:2026-02-01'
        assert keys.stats('alice') == 'bowldem:stats:alice'
        assert keys.leaderboard('2026-02-01') == 'bowldem:leaderboard:2026-02-01'


class StoreContract:
    """Behaviour every store adapter must share."""

    def test_get_set_delete(self, kv):
        assert kv.get('k') is None
        kv.set('k', '"v"')
        assert kv.get('k') == '"v"'
        assert kv.delete('k') is True
        assert kv.delete('k') is False
        assert kv.get('k') is None

    def test_versions_advance_on_write(self, kv):
        assert kv.get_versioned('k') == (None, 0)
        kv.set('k', 'a')
        _, first = kv.get_versioned('k')
        kv.set('k', 'b')
        value, second = kv.get_versioned('k')
        assert value == 'b'
        assert second > first

    def test_compare_and_set_insert_if_absent(self, kv):
        assert kv.compare_and_set('k', 'a', 0) is True
        assert kv.compare_and_set('k', 'b', 0) is False
        assert kv.get('k') == 'a'

    def test_compare_and_set_detects_stale_version(self, kv):
        kv.compare_and_set('k', 'a', 0)
        _, version = kv.get_versioned('k')

        # Another writer gets in first
        assert kv.compare_and_set('k', 'b', version) is True
        assert kv.compare_and_set('k', 'c', version) is False
        assert kv.get('k') == 'b'

    def test_sorted_set_orders_by_score_then_arrival(self, kv):
        kv.sorted_set_upsert('lb', 'late', 2)
        kv.sorted_set_upsert('lb', 'best', 1)
        kv.sorted_set_upsert('lb', 'later', 2)

        assert kv.sorted_set_range('lb', 0, 10) == [('best', 1), ('late', 2), ('later', 2)]
        assert kv.sorted_set_rank('lb', 'later') == 2
        assert kv.sorted_set_rank('lb', 'missing') is None
        assert kv.sorted_set_score('lb', 'late') == 2
        assert kv.sorted_set_score('lb', 'missing') is None

    def test_sorted_set_upsert_keeps_arrival_position(self, kv):
        kv.sorted_set_upsert('lb', 'first', 3)
        kv.sorted_set_upsert('lb', 'second', 2)
        kv.sorted_set_upsert('lb', 'first', 2)

        assert [m for m, _ in kv.sorted_set_range('lb', 0, 10)] == ['first', 'second']

    def test_sorted_set_range_paging(self, kv):
        for i in range(5):
            kv.sorted_set_upsert('lb', f'u{i}', i)
        assert [m for m, _ in kv.sorted_set_range('lb', 1, 2)] == ['u1', 'u2']


class TestMemoryStore(StoreContract):

    @pytest.fixture
    def kv(self):
        return MemoryStore()


@pytest.mark.skipif(not os.getenv('MONGO_TEST_URI'), reason="MONGO_TEST_URI not set")
class TestMongoStore(StoreContract):

    @pytest.fixture
    def kv(self):
        db_name = f"bowldem_test_{uuid.uuid4().hex[:8]}"
        store = MongoStore(os.environ['MONGO_TEST_URI'], db_name)
        yield store
        store.client.drop_database(db_name)
        store.close()

    def test_rescoring_does_not_consume_a_sequence_number(self, kv):
        for member in ['a', 'b', 'a', 'a', 'c']:
            kv.sorted_set_upsert('lb', member, 1)
        assert kv.counters_collection.find_one({"_id": 'lb'})["seq"] == 3


class TestMongoUpsertPath:

    @pytest.fixture
    def mongo(self):
        return MongoStore(None, client=MagicMock())

    def test_existing_member_only_updates_score(self, mongo):
        mongo.sorted_collection.update_one.return_value.matched_count = 1

        mongo.sorted_set_upsert('lb', 'alice', 2)

        mongo.counters_collection.find_one_and_update.assert_not_called()
        mongo.sorted_collection.insert_one.assert_not_called()

    def test_new_member_takes_next_sequence_number(self, mongo):
        mongo.sorted_collection.update_one.return_value.matched_count = 0
        mongo.counters_collection.find_one_and_update.return_value = {"_id": 'lb', "seq": 4}

        mongo.sorted_set_upsert('lb', 'alice', 2)

        mongo.sorted_collection.insert_one.assert_called_once_with(
            {"set": 'lb', "member": 'alice', "score": 2, "seq": 4}
        )


class TestInitialize:

    def test_memory_backend(self):
        assert isinstance(initialize_storage_service('memory'), MemoryStore)

    def test_mongo_backend_requires_uri(self):
        with pytest.raises(ValueError):
            initialize_storage_service('mongo', mongo_uri=None)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            initialize_storage_service('sqlite')
