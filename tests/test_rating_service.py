import asyncio

from storerate.services import rating as rating_service
from storerate.services.rating import (
    apply_new_rating,
    apply_rating_change,
    compute_average,
    recalculate_store_rating,
    submit_rating,
)


def test_compute_average_handles_empty_store():
    assert compute_average(0, 0) == 0.0
    assert compute_average(9, 2) == 4.5


async def test_counters_follow_new_and_changed_ratings(db, owner_and_store):
    _, store = owner_and_store

    await apply_new_rating(db, store.id, 5)
    await apply_new_rating(db, store.id, 3)
    await apply_rating_change(db, store.id, 3, 1)

    stored = await db.stores.find_one({"id": store.id})
    assert stored["rating_sum"] == 6
    assert stored["total_ratings"] == 2
    assert stored["average_rating"] == 3.0


async def test_stale_average_is_not_published(db, owner_and_store):
    _, store = owner_and_store
    snapshot = await apply_new_rating(db, store.id, 1)
    await apply_new_rating(db, store.id, 5)

    # A late writer holding old counters must not overwrite the newer average
    await rating_service._publish_average(db, snapshot)

    stored = await db.stores.find_one({"id": store.id})
    assert stored["average_rating"] == 3.0


async def test_apply_to_missing_store_is_noop(db):
    assert await apply_new_rating(db, "missing", 4) is None


async def test_submit_rating_create_then_update(db, normal_user, owner_and_store):
    _, store = owner_and_store

    created, was_created = await submit_rating(db, store.id, normal_user.id, 2)
    updated, was_created_again = await submit_rating(db, store.id, normal_user.id, 4)

    assert was_created is True
    assert was_created_again is False
    assert updated.id == created.id
    assert updated.rating == 4


async def test_concurrent_submissions_keep_counters_consistent(db, owner_and_store):
    _, store = owner_and_store
    values = {f"user-{i}": (i % 5) + 1 for i in range(20)}

    await asyncio.gather(*(submit_rating(db, store.id, uid, v) for uid, v in values.items()))
    # Same users change their minds
    await asyncio.gather(*(submit_rating(db, store.id, uid, 6 - v) for uid, v in values.items()))

    stored = await db.stores.find_one({"id": store.id})
    expected_sum = sum(6 - v for v in values.values())
    assert stored["total_ratings"] == 20
    assert stored["rating_sum"] == expected_sum
    assert stored["average_rating"] == expected_sum / 20


async def test_duplicate_submissions_for_one_user_store_once(db, owner_and_store):
    _, store = owner_and_store

    await asyncio.gather(*(submit_rating(db, store.id, "same-user", 3) for _ in range(5)))

    assert await db.ratings.count_documents({"storeId": store.id}) == 1
    stored = await db.stores.find_one({"id": store.id})
    assert stored["total_ratings"] == 1


async def test_recalculate_repairs_drifted_counters(db, normal_user, owner_and_store):
    _, store = owner_and_store
    await submit_rating(db, store.id, normal_user.id, 4)
    await submit_rating(db, store.id, "another-user", 2)
    await db.stores.update_one(
        {"id": store.id}, {"$set": {"rating_sum": 99, "total_ratings": 7, "average_rating": 1.0}}
    )

    count = await recalculate_store_rating(db, store.id)

    assert count == 2
    stored = await db.stores.find_one({"id": store.id})
    assert stored["rating_sum"] == 6
    assert stored["total_ratings"] == 2
    assert stored["average_rating"] == 3.0
