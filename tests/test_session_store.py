"""Тесты хранилища сессий и реестра блокировок."""
import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from quiz_bot.core.models import QuizSession
from quiz_bot.core.session_store import QuizSessionStore
from quiz_bot.utils.user_locks import UserLocks


def _session(user_id: str = "u1") -> QuizSession:
    return QuizSession(user_id=user_id, questions=(), total_questions=0)


class TestQuizSessionStore:

    def test_get_missing(self, store):
        assert store.get("nobody") is None

    def test_set_and_get(self, store):
        session = _session()
        store.set("u1", session)
        assert store.get("u1") is session

    def test_set_replaces(self, store):
        store.set("u1", _session())
        replacement = _session()
        store.set("u1", replacement)

        assert store.get("u1") is replacement
        assert len(store) == 1

    def test_remove_reports_presence(self, store):
        store.set("u1", _session())

        assert store.remove("u1") is True
        assert store.remove("u1") is False
        assert store.get("u1") is None

    def test_update_mutates_in_place(self, store):
        session = _session()
        store.set("u1", session)

        def bump(s):
            s.score += 2

        assert store.update("u1", bump) is True
        assert store.get("u1").score == 2

    def test_update_missing_is_noop(self, store):
        called = []
        assert store.update("u1", called.append) is False
        assert called == []
        assert len(store) == 0

    def test_instances_are_isolated(self):
        """Каждый экземпляр — своё хранилище, без глобального состояния."""
        first, second = QuizSessionStore(), QuizSessionStore()
        first.set("u1", _session())
        assert second.get("u1") is None

    def test_concurrent_threads_different_keys(self, store):
        users = [f"user-{i}" for i in range(200)]

        def work(user_id):
            store.set(user_id, _session(user_id))
            store.update(user_id, lambda s: setattr(s, "score", 1))
            return store.get(user_id).user_id

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, users))

        assert results == users
        assert len(store) == 200

    def test_concurrent_updates_same_key(self, store):
        """update атомарен: ни один инкремент не теряется."""
        store.set("u1", _session())

        def bump(_):
            store.update("u1", lambda s: setattr(s, "score", s.score + 1))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(bump, range(500)))

        assert store.get("u1").score == 500


class TestUserLocks:
    """Тесты реестра блокировок по пользователю."""

    async def test_entry_dropped_after_release(self):
        locks = UserLocks()

        async with locks.hold("a"):
            assert len(locks) == 1

        assert len(locks) == 0

    async def test_same_user_serialized(self):
        locks = UserLocks()
        order = []

        async def worker(name):
            async with locks.hold("a"):
                order.append(f"{name}-in")
                await asyncio.sleep(0)
                order.append(f"{name}-out")

        await asyncio.gather(worker("first"), worker("second"))

        assert order == ["first-in", "first-out", "second-in", "second-out"]
        assert len(locks) == 0

    async def test_different_users_do_not_wait(self):
        locks = UserLocks()

        async with locks.hold("a"):
            await asyncio.wait_for(self._enter(locks, "b"), timeout=1)
            assert len(locks) == 1

        assert len(locks) == 0

    async def test_cancelled_waiter_cleans_up(self):
        locks = UserLocks()

        async with locks.hold("a"):
            waiter = asyncio.create_task(self._enter(locks, "a"))
            await asyncio.sleep(0)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

        assert len(locks) == 0

    async def test_error_inside_releases(self):
        locks = UserLocks()

        with pytest.raises(RuntimeError):
            async with locks.hold("a"):
                raise RuntimeError("boom")

        assert len(locks) == 0

    @staticmethod
    async def _enter(locks, user_id):
        async with locks.hold(user_id):
            pass
