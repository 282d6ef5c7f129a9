"""Tests for the task store."""
import asyncio
from datetime import datetime

import pytest

from taskboard.core.exceptions import StorageFailure
from taskboard.schemas.task import Task


@pytest.mark.asyncio
async def test_inserted_task_is_listed_and_retrievable(store):
    """A task without id gets one assigned and reads back unchanged."""
    stored = await store.upsert(Task(title="Write report", description="Quarterly numbers"))

    assert stored.id is not None
    assert await store.get(stored.id) == stored
    assert stored in await store.list_tasks()


@pytest.mark.asyncio
async def test_get_missing_task_returns_none(store):
    assert await store.get(404) is None


@pytest.mark.asyncio
async def test_upsert_is_idempotent(store, make_task):
    task = make_task(7, "Same record")

    await store.upsert(task)
    first = await store.list_tasks()
    await store.upsert(task)

    assert await store.list_tasks() == first
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_upsert_replaces_whole_record(store, make_task):
    await store.upsert(make_task(5, "Old", description="old text", completed=True))
    replacement = make_task(5, "New", description="", created=datetime(2024, 6, 1), synced=True)

    await store.upsert(replacement)

    assert await store.get(5) == replacement


@pytest.mark.asyncio
async def test_listing_order(store, make_task):
    """Incomplete before completed, then newest first."""
    await store.upsert_many(
        [
            make_task(1, completed=True, created=datetime(2024, 1, 3)),
            make_task(2, completed=False, created=datetime(2024, 1, 1)),
            make_task(3, completed=True, created=datetime(2024, 1, 5)),
            make_task(4, completed=False, created=datetime(2024, 1, 4)),
            make_task(5, completed=False, created=datetime(2024, 1, 2)),
        ]
    )

    ordered = await store.list_tasks()

    assert [t.id for t in ordered] == [4, 5, 2, 3, 1]


@pytest.mark.asyncio
async def test_failed_batch_writes_nothing(store, make_task):
    """A batch that fails mid-way leaves no partial writes behind."""
    await store.upsert(make_task(1, "Keep me"))
    invalid = Task.model_construct(
        id=3,
        title=None,
        description="",
        is_completed=False,
        created_at=datetime(2024, 1, 1),
        synced_with_network=False,
    )

    with pytest.raises(StorageFailure):
        await store.upsert_many([make_task(2, "Would be fine"), make_task(1, "Changed"), invalid])

    tasks = await store.list_tasks()
    assert [t.id for t in tasks] == [1]
    assert tasks[0].title == "Keep me"


@pytest.mark.asyncio
async def test_delete_missing_task_is_noop(store, make_task):
    await store.upsert(make_task(1))

    assert await store.delete(1) is True
    assert await store.delete(1) is False
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_toggle_completion_flips_only_the_flag(store, make_task):
    original = make_task(1, "Flip me", description="details")
    await store.upsert(original)

    toggled = await store.toggle_completion(1)

    assert toggled.is_completed is True
    assert toggled.model_copy(update={"is_completed": False}) == original
    assert await store.toggle_completion(99) is None


@pytest.mark.asyncio
async def test_update_edits_fields_in_place(store, make_task):
    original = make_task(1, "Before", created=datetime(2024, 3, 1), synced=True)
    await store.upsert(original)

    updated = await store.update(
        original.model_copy(update={"title": "After", "description": "new", "created_at": datetime(2030, 1, 1)})
    )

    assert updated.title == "After"
    assert updated.description == "new"
    assert updated.created_at == datetime(2024, 3, 1)
    assert updated.synced_with_network is True
    assert await store.update(make_task(42)) is None
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_write_survives_failed_list_refresh(store, monkeypatch):
    subscription = await store.observe()
    await subscription.get()

    async def failing_snapshot():
        raise StorageFailure("database is locked")

    monkeypatch.setattr(store, "_snapshot", failing_snapshot)

    stored = await store.upsert(Task(title="Committed anyway"))

    assert stored.id is not None
    assert (await store.get(stored.id)).title == "Committed anyway"
    subscription.close()


@pytest.mark.asyncio
async def test_clear_removes_everything(store, make_task):
    await store.upsert_many([make_task(1), make_task(2), make_task(3)])

    assert await store.clear() == 3
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_observe_emits_snapshot_after_each_mutation(store):
    subscription = await store.observe()

    assert await subscription.get() == []

    added = await store.upsert(Task(title="Observed"))
    assert await subscription.get() == [added]

    await store.delete(added.id)
    assert await subscription.get() == []

    subscription.close()


@pytest.mark.asyncio
async def test_concurrent_writes_are_serialized_in_commit_order(store):
    subscription = await store.observe()
    await subscription.get()

    await asyncio.gather(*(store.upsert(Task(title=f"Task {i}")) for i in range(10)))

    sizes = [len(await asyncio.wait_for(subscription.get(), timeout=1)) for _ in range(10)]
    assert sizes == list(range(1, 11))
    assert await store.count() == 10


@pytest.mark.asyncio
async def test_closing_observer_does_not_affect_store(store, make_task):
    subscription = await store.observe()
    subscription.close()

    await store.upsert(make_task(1))

    assert await store.count() == 1
    with pytest.raises(StopAsyncIteration):
        await subscription.get()


@pytest.mark.asyncio
async def test_storage_errors_raise_storage_failure(store, broken_storage):
    with pytest.raises(StorageFailure) as exc_info:
        await store.upsert(Task(title="Nowhere to go"))

    assert "tasks" in exc_info.value.message
