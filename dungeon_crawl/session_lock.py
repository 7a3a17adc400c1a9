from asyncio import Lock
from contextlib import asynccontextmanager
from uuid import UUID


class SessionLockManager:
    def __init__(self):
        self.locks = {}  # one Lock per session_id
        self.waiters = {}  # number of holders/waiters per session_id
        self.lock = Lock()  # protects locks and waiters

    async def acquire_lock(self, session_id: UUID) -> Lock:
        """Get the Lock of the specified session_id, registering the caller as a waiter

        Args:
            session_id (UUID): ID to identify this game session

        Returns:
            Lock: Lock of the specified session_id
        """
        async with self.lock:
            if session_id not in self.locks:
                self.locks[session_id] = Lock()
                self.waiters[session_id] = 0
            self.waiters[session_id] += 1
            return self.locks[session_id]

    async def release_lock(self, session_id: UUID):
        """Unregister a waiter and drop the Lock once nobody uses it

        Args:
            session_id (UUID): ID to identify this game session
        """
        async with self.lock:
            self.waiters[session_id] -= 1
            if self.waiters[session_id] == 0:
                del self.locks[session_id]
                del self.waiters[session_id]

    @asynccontextmanager
    async def hold(self, session_id: UUID):
        """Serialize the enclosed block with every other block holding the same session_id"""
        session_lock = await self.acquire_lock(session_id)
        try:
            async with session_lock:
                yield
        finally:
            await self.release_lock(session_id)

    def active_count(self) -> int:
        return len(self.locks)
