from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from movielikes.user_store import IdAllocator, InMemoryUserStore, User, UserNotFoundError


def test_seeded_directory_scenario():
    store = InMemoryUserStore.with_default_seed()

    nova = store.create("Nova")
    assert nova.id == "7"
    assert nova.name == "Nova"
    assert nova.likes == ()

    assert store.get("7") is nova

    assert store.like("7", "tt0111161") is True
    assert store.like("7", "tt0111161") is False
    assert store.get("7").likes == ("tt0111161",)

    with pytest.raises(UserNotFoundError):
        store.like("99", "tt0111161")


def test_seeded_users_are_lookupable():
    store = InMemoryUserStore.with_default_seed()
    assert store.seeded_count == 6
    assert store.get("1").name == "Chris"
    assert store.get("6").name == "Cameron"
    assert store.next_id == 7


def test_lookup_unknown_id_raises_not_found():
    store = InMemoryUserStore()
    with pytest.raises(UserNotFoundError) as exc_info:
        store.get("1")
    assert exc_info.value.user_id == "1"
    assert isinstance(exc_info.value, LookupError)
    assert store.exists("1") is False


def test_like_preserves_first_insertion_order():
    store = InMemoryUserStore()
    u = store.create("Ada")
    for ref in ["tt3", "tt1", "tt2", "tt1", "tt3"]:
        store.like(u.id, ref)
    assert u.likes == ("tt3", "tt1", "tt2")


def test_likes_snapshot_is_not_a_live_view():
    store = InMemoryUserStore()
    u = store.create("Ada")
    before = u.likes
    store.like(u.id, "tt1")
    assert before == ()
    assert u.likes == ("tt1",)


def test_create_rejects_blank_name():
    store = InMemoryUserStore()
    with pytest.raises(ValueError):
        store.create("   ")
    # A rejected create must not consume an id.
    assert store.create("Ada").id == "1"


def test_like_rejects_blank_reference():
    store = InMemoryUserStore()
    u = store.create("Ada")
    with pytest.raises(ValueError):
        store.like(u.id, "")


def test_start_id_must_exceed_seeded_ids():
    seed = [User(id="1", name="a"), User(id="10", name="b")]
    with pytest.raises(ValueError):
        InMemoryUserStore(seed=seed, start_id=10)

    store = InMemoryUserStore(seed=seed)
    assert store.create("c").id == "11"

    store = InMemoryUserStore(seed=[User(id="1", name="a")], start_id=100)
    assert store.create("c").id == "100"


def test_duplicate_seed_ids_rejected():
    with pytest.raises(ValueError):
        InMemoryUserStore(seed=[User(id="1", name="a"), User(id="1", name="b")])


def test_id_allocator_is_monotonic():
    ids = IdAllocator(5)
    assert [ids.next() for _ in range(3)] == ["5", "6", "7"]
    assert ids.peek() == 8


def test_concurrent_creates_produce_unique_contiguous_ids():
    store = InMemoryUserStore.with_default_seed()

    with ThreadPoolExecutor(max_workers=16) as pool:
        users = list(pool.map(lambda i: store.create(f"user-{i}"), range(100)))

    ids = [u.id for u in users]
    assert len(set(ids)) == 100
    assert {int(i) for i in ids} == set(range(7, 107))
    for u in users:
        assert store.get(u.id) is u
        assert store.get(u.id).id == u.id
    assert len(store) == 106


def test_concurrent_likes_same_reference_are_idempotent():
    store = InMemoryUserStore()
    u = store.create("Ada")
    barrier = threading.Barrier(20)

    def hit() -> bool:
        barrier.wait()
        return store.like(u.id, "tt0111161")

    with ThreadPoolExecutor(max_workers=20) as pool:
        results = list(pool.map(lambda _: hit(), range(20)))

    assert results.count(True) == 1
    assert u.likes == ("tt0111161",)


def test_concurrent_likes_on_one_user_lose_nothing():
    store = InMemoryUserStore()
    u = store.create("Ada")
    refs = [f"tt{i:07d}" for i in range(500)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda r: store.like(u.id, r), refs))

    assert sorted(u.likes) == refs
    assert len(u.likes) == len(set(u.likes))


def test_concurrent_likes_on_different_users_all_apply():
    store = InMemoryUserStore()
    a = store.create("A")
    b = store.create("B")

    def like_many(user_id: str, prefix: str) -> None:
        for i in range(200):
            store.like(user_id, f"{prefix}{i}")

    threads = [
        threading.Thread(target=like_many, args=(a.id, "a")),
        threading.Thread(target=like_many, args=(b.id, "b")),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(a.likes) == 200
    assert len(b.likes) == 200
    assert all(r.startswith("a") for r in a.likes)
    assert all(r.startswith("b") for r in b.likes)


def test_like_does_not_wait_on_another_users_lock():
    store = InMemoryUserStore()
    a = store.create("A")
    b = store.create("B")

    # Hold A's record lock; liking for B and creating C must still go through.
    with a._lock:
        done = threading.Event()

        def other_work() -> None:
            store.like(b.id, "tt1")
            store.create("C")
            done.set()

        t = threading.Thread(target=other_work)
        t.start()
        assert done.wait(timeout=5)
        t.join()

    assert b.likes == ("tt1",)


def test_lookup_racing_create_never_sees_partial_record():
    store = InMemoryUserStore()
    stop = threading.Event()
    seen: list[User] = []

    def reader() -> None:
        while not stop.is_set():
            for i in range(1, 201):
                try:
                    u = store.get(str(i))
                except UserNotFoundError:
                    continue
                seen.append(u)

    t = threading.Thread(target=reader)
    t.start()
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: store.create(f"user-{i}"), range(200)))
    stop.set()
    t.join()

    for u in seen:
        assert u.name.startswith("user-")
        assert u.likes is not None


def test_like_unknown_user_is_not_found_even_with_blank_reference():
    store = InMemoryUserStore.with_default_seed()
    with pytest.raises(UserNotFoundError):
        store.like("99", "")


def test_like_stores_reference_verbatim():
    store = InMemoryUserStore()
    u = store.create("Ada")
    assert store.like(u.id, " tt1 ") is True
    assert u.likes == (" tt1 ",)
    assert store.like(u.id, "tt1") is True
    assert u.likes == (" tt1 ", "tt1")


def test_non_decimal_seed_ids_do_not_affect_allocator():
    store = InMemoryUserStore(seed=[User(id="²", name="x"), User(id="admin", name="y"), User(id="3", name="z")])
    assert store.get("²").name == "x"
    assert store.create("new").id == "4"
