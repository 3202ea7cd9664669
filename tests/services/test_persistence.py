"""Tests for PersistenceGateway: load, save, subscribe, migrate."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest
from pydantic import ValidationError

from tasktrack.domain.models import AppState, Category, Meta, Task
from tasktrack.infrastructure.storage import MemoryStorage
from tasktrack.services.persistence import DEFAULT_STATE_KEY, PersistenceGateway, migrate
from tests.conftest import FailingStorage


def _sample_state() -> AppState:
    return AppState(
        meta=Meta(collapsed_by_category_id={"cat_a": True}),
        categories=(
            Category(id="cat_a", name="Chores", created_at=100, order=0),
            Category(id="cat_b", name="Work", created_at=200, order=1),
        ),
        tasks=(
            Task(
                id="task_1",
                category_id="cat_a",
                title="Wash dishes",
                done=True,
                created_at=110,
                updated_at=150,
            ),
        ),
    )


class TestMigrate:
    @pytest.mark.parametrize("raw", [None, {}, "", 0, [], "garbage", 42])
    def test_absent_or_non_mapping_yields_fresh_state(self, raw: Any) -> None:
        assert migrate(raw) == AppState()

    def test_current_version_passes_through(self) -> None:
        state = _sample_state()
        assert migrate(state.to_payload()) == state

    def test_missing_meta_is_rebuilt(self) -> None:
        payload = _sample_state().to_payload()
        del payload["meta"]
        migrated = migrate(payload)
        assert migrated.meta == Meta()
        assert len(migrated.categories) == 2
        assert len(migrated.tasks) == 1

    def test_old_version_keeps_collapsed_mapping(self) -> None:
        payload = _sample_state().to_payload()
        payload["meta"] = {"version": 0, "collapsedByCategoryId": {"cat_b": True}}
        migrated = migrate(payload)
        assert migrated.meta.version == 1
        assert migrated.meta.collapsed_by_category_id == {"cat_b": True}

    def test_future_version_is_normalized(self) -> None:
        payload = _sample_state().to_payload()
        payload["meta"]["version"] = 7
        assert migrate(payload).meta.version == 1

    def test_meta_without_mapping_gets_empty_flags(self) -> None:
        payload = _sample_state().to_payload()
        payload["meta"] = {"version": "1", "collapsedByCategoryId": ["not", "a", "dict"]}
        assert migrate(payload).meta.collapsed_by_category_id == {}

    def test_does_not_mutate_input(self) -> None:
        payload: dict[str, Any] = {"categories": [], "tasks": []}
        migrate(payload)
        assert "meta" not in payload

    def test_never_discards_entities(self) -> None:
        payload = _sample_state().to_payload()
        payload["meta"] = None
        migrated = migrate(payload)
        assert [c.id for c in migrated.categories] == ["cat_a", "cat_b"]
        assert [t.id for t in migrated.tasks] == ["task_1"]

    @pytest.mark.parametrize("flags", [None, "yes", ["cat_a"], 3])
    def test_current_version_with_bad_flags_keeps_entities(self, flags: Any) -> None:
        payload = _sample_state().to_payload()
        payload["meta"] = {"version": 1, "collapsedByCategoryId": flags}
        migrated = migrate(payload)
        assert migrated.meta == Meta()
        assert [c.id for c in migrated.categories] == ["cat_a", "cat_b"]
        assert [t.id for t in migrated.tasks] == ["task_1"]

    def test_non_bool_flags_dropped(self) -> None:
        payload = _sample_state().to_payload()
        payload["meta"]["collapsedByCategoryId"] = {"cat_a": True, "cat_b": "no", "cat_c": 1}
        assert migrate(payload).meta.collapsed_by_category_id == {"cat_a": True}

    def test_malformed_entity_raises(self) -> None:
        with pytest.raises(ValidationError):
            migrate({"meta": {"version": 1}, "categories": [{"id": "c"}], "tasks": []})

    def test_json_round_trip(self) -> None:
        state = _sample_state()
        assert migrate(json.loads(json.dumps(state.to_payload()))) == state

    def test_app_state_passes_through(self) -> None:
        state = _sample_state()
        assert migrate(state) is state


class TestLoad:
    def test_empty_storage(self, gateway: PersistenceGateway) -> None:
        assert gateway.load() == AppState()

    def test_loads_saved_state(self, storage: MemoryStorage) -> None:
        state = _sample_state()
        storage.set(DEFAULT_STATE_KEY, json.dumps(state.to_payload()).encode())
        assert PersistenceGateway(storage).load() == state

    def test_custom_key(self, storage: MemoryStorage) -> None:
        gateway = PersistenceGateway(storage, key="other.v1")
        gateway.save(_sample_state())
        assert storage.get("other.v1") is not None
        assert storage.get(DEFAULT_STATE_KEY) is None
        assert gateway.key == "other.v1"

    def test_corrupt_json_falls_back(
        self, storage: MemoryStorage, caplog: pytest.LogCaptureFixture
    ) -> None:
        storage.set(DEFAULT_STATE_KEY, b"{not json")
        with caplog.at_level(logging.WARNING, logger="tasktrack"):
            state = PersistenceGateway(storage).load()
        assert state == AppState()
        assert "StorageReadFailure" in caplog.text

    def test_invalid_utf8_falls_back(self, storage: MemoryStorage) -> None:
        storage.set(DEFAULT_STATE_KEY, b"\xff\xfe\xfa")
        assert PersistenceGateway(storage).load() == AppState()

    def test_null_flags_keep_entities(self, storage: MemoryStorage) -> None:
        payload = _sample_state().to_payload()
        payload["meta"]["collapsedByCategoryId"] = None
        storage.set(DEFAULT_STATE_KEY, json.dumps(payload).encode())
        state = PersistenceGateway(storage).load()
        assert len(state.categories) == 2
        assert len(state.tasks) == 1
        assert state.meta.collapsed_by_category_id == {}

    def test_malformed_entities_fall_back(self, storage: MemoryStorage) -> None:
        storage.set(DEFAULT_STATE_KEY, b'{"categories": [{"id": 1}]}')
        assert PersistenceGateway(storage).load() == AppState()

    def test_read_failure_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = PersistenceGateway(FailingStorage(fail_read=True))
        with caplog.at_level(logging.WARNING, logger="tasktrack"):
            assert gateway.load() == AppState()
        assert "disk unavailable" in caplog.text

    def test_old_blob_is_migrated(self, storage: MemoryStorage) -> None:
        payload = _sample_state().to_payload()
        del payload["meta"]
        storage.set(DEFAULT_STATE_KEY, json.dumps(payload).encode())
        state = PersistenceGateway(storage).load()
        assert state.meta.version == 1
        assert len(state.categories) == 2


class TestSave:
    def test_writes_camel_case_json(
        self, gateway: PersistenceGateway, storage: MemoryStorage
    ) -> None:
        assert gateway.save(_sample_state()) is True
        blob = storage.get(DEFAULT_STATE_KEY)
        assert blob is not None
        payload = json.loads(blob)
        assert payload["meta"] == {"version": 1, "collapsedByCategoryId": {"cat_a": True}}
        assert payload["tasks"][0]["categoryId"] == "cat_a"

    def test_save_then_load(self, gateway: PersistenceGateway) -> None:
        state = _sample_state()
        gateway.save(state)
        assert gateway.load() == state

    def test_notifies_with_saved_state(self, gateway: PersistenceGateway) -> None:
        received: list[AppState] = []
        gateway.subscribe(received.append)
        state = _sample_state()
        gateway.save(state)
        assert received == [state]

    def test_notifies_in_subscription_order(self, gateway: PersistenceGateway) -> None:
        calls: list[str] = []
        gateway.subscribe(lambda s: calls.append("first"))
        gateway.subscribe(lambda s: calls.append("second"))
        gateway.subscribe(lambda s: calls.append("third"))
        gateway.save(AppState())
        assert calls == ["first", "second", "third"]

    def test_write_failure_skips_subscribers(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = PersistenceGateway(FailingStorage(fail_write=True))
        received: list[AppState] = []
        gateway.subscribe(received.append)
        with caplog.at_level(logging.ERROR, logger="tasktrack"):
            assert gateway.save(_sample_state()) is False
        assert received == []
        assert "StorageWriteFailure" in caplog.text

    def test_failing_subscriber_does_not_block_others(
        self, gateway: PersistenceGateway, caplog: pytest.LogCaptureFixture
    ) -> None:
        received: list[AppState] = []

        def boom(state: AppState) -> None:
            raise RuntimeError("render crashed")

        gateway.subscribe(boom)
        gateway.subscribe(received.append)
        with caplog.at_level(logging.ERROR, logger="tasktrack"):
            assert gateway.save(AppState()) is True
        assert len(received) == 1
        assert "render crashed" in caplog.text


class TestSubscribe:
    def test_registration_is_idempotent(self, gateway: PersistenceGateway) -> None:
        calls: list[AppState] = []

        def callback(state: AppState) -> None:
            calls.append(state)

        gateway.subscribe(callback)
        gateway.subscribe(callback)
        assert gateway.subscriber_count == 1
        gateway.save(AppState())
        assert len(calls) == 1

    def test_bound_methods_are_same_identity(self, gateway: PersistenceGateway) -> None:
        class View:
            def __init__(self) -> None:
                self.renders = 0

            def render(self, state: AppState) -> None:
                self.renders += 1

        view = View()
        gateway.subscribe(view.render)
        gateway.subscribe(view.render)
        gateway.save(AppState())
        assert view.renders == 1

    def test_unsubscribe(self, gateway: PersistenceGateway) -> None:
        calls: list[AppState] = []
        unsubscribe = gateway.subscribe(calls.append)
        gateway.save(AppState())
        unsubscribe()
        gateway.save(AppState())
        assert len(calls) == 1
        assert gateway.subscriber_count == 0

    def test_unsubscribe_twice_is_harmless(self, gateway: PersistenceGateway) -> None:
        unsubscribe = gateway.subscribe(lambda s: None)
        unsubscribe()
        unsubscribe()
        assert gateway.subscriber_count == 0

    def test_unsubscribe_only_removes_own_callback(self, gateway: PersistenceGateway) -> None:
        first: list[AppState] = []
        second: list[AppState] = []
        drop_first = gateway.subscribe(first.append)
        gateway.subscribe(second.append)
        drop_first()
        gateway.save(AppState())
        assert first == []
        assert len(second) == 1
