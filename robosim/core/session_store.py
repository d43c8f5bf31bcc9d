import asyncio
import time
from typing import Callable, Dict, Optional

from loguru import logger

from robosim.models.physics import MotorParams, PhysicsConfig
from robosim.models.session_state import AnyRun, SessionState

SESSION_TTL_SECONDS = 30 * 60
CLEANUP_INTERVAL_SECONDS = 5 * 60
MAX_RUNS_PER_SESSION = 10


class InMemoryStateStore:
    """
    Per-session physics, motor and run history, held in process memory.

    Sessions are created on first touch and evicted once they have not been
    accessed for ``ttl_seconds``. Eviction runs on demand through ``cleanup``
    and periodically once ``start`` has been awaited.
    """

    def __init__(
        self,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        cleanup_interval: float = CLEANUP_INTERVAL_SECONDS,
        max_runs: int = MAX_RUNS_PER_SESSION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval
        self.max_runs = max_runs
        self.clock = clock
        self.__sessions: Dict[str, SessionState] = {}
        self.__locks: Dict[str, asyncio.Lock] = {}
        self.__running = False
        self.__task: Optional[asyncio.Task] = None

    async def start(self):
        """Start the periodic eviction loop."""
        if self.__running:
            return
        self.__running = True
        self.__task = asyncio.create_task(self._cleanup_loop())

    async def stop(self):
        self.__running = False
        if self.__task:
            self.__task.cancel()
            try:
                await self.__task
            except asyncio.CancelledError:
                pass
            self.__task = None

    async def _cleanup_loop(self):
        while self.__running:
            await asyncio.sleep(self.cleanup_interval)
            try:
                self.cleanup()
            except Exception as e:
                logger.error(f"Session cleanup failed: {e}")

    def lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self.__locks:
            self.__locks[session_id] = asyncio.Lock()
        return self.__locks[session_id]

    def get_or_create(self, session_id: str) -> SessionState:
        now = self.clock()
        session = self.__sessions.get(session_id)

        if session is None:
            session = SessionState(
                session_id=session_id, created_at=now, last_accessed=now
            )
            self.__sessions[session_id] = session
            logger.info(f"Created new session: {session_id}")
        else:
            session.last_accessed = now

        return session

    def get(self, session_id: str) -> Optional[SessionState]:
        session = self.__sessions.get(session_id)
        if session:
            session.last_accessed = self.clock()
        return session

    def update_physics(self, session_id: str, physics: PhysicsConfig) -> PhysicsConfig:
        """Merge the fields explicitly set on ``physics`` into the session config."""
        session = self.get_or_create(session_id)
        changes = physics.model_dump(exclude_unset=True)
        session.physics = session.physics.model_copy(update=changes)
        logger.debug(f"Updated physics for {session_id}: {session.physics}")
        return session.physics

    def update_motor(self, session_id: str, joint_id: str, **params) -> MotorParams:
        """
        Partial update of one joint. Only non-None values are applied; a joint
        that has never been configured starts from the default parameters.
        """
        session = self.get_or_create(session_id)
        existing = session.motors.get(joint_id) or MotorParams(joint_id=joint_id)

        changes = {k: v for k, v in params.items() if v is not None}
        changes["joint_id"] = joint_id
        updated = MotorParams.model_validate({**existing.model_dump(), **changes})

        session.motors[joint_id] = updated
        logger.debug(f"Updated motor {joint_id} for {session_id}: {updated}")
        return updated

    def add_run(self, session_id: str, run: AnyRun) -> None:
        session = self.get_or_create(session_id)
        session.runs.append(run)
        session.current_run = run

        if len(session.runs) > self.max_runs:
            session.runs = session.runs[-self.max_runs:]

        logger.info(f"Added run {run.run_id} for {session_id}")

    def get_latest_run(self, session_id: str) -> Optional[AnyRun]:
        session = self.get(session_id)
        if session is None:
            return None
        if session.current_run is not None:
            return session.current_run
        return session.runs[-1] if session.runs else None

    def get_run(self, session_id: str, run_id: str) -> Optional[AnyRun]:
        session = self.get(session_id)
        if session is None:
            return None
        for run in session.runs:
            if run.run_id == run_id:
                return run
        return None

    def delete(self, session_id: str) -> bool:
        self.__locks.pop(session_id, None)
        if self.__sessions.pop(session_id, None) is None:
            return False
        logger.info(f"Deleted session: {session_id}")
        return True

    def session_count(self) -> int:
        return len(self.__sessions)

    def lock_count(self) -> int:
        return len(self.__locks)

    def cleanup(self) -> int:
        now = self.clock()
        expired = [
            session_id
            for session_id, session in self.__sessions.items()
            if now - session.last_accessed > self.ttl_seconds
        ]

        for session_id in expired:
            del self.__sessions[session_id]
            logger.info(f"Cleaned up expired session: {session_id}")

        # locks outlive sessions for calls that never create one
        idle_locks = [
            session_id
            for session_id, lock in self.__locks.items()
            if session_id not in self.__sessions and not lock.locked()
        ]
        for session_id in idle_locks:
            del self.__locks[session_id]

        if expired:
            logger.info(
                f"Cleaned {len(expired)} expired sessions. Active: {len(self.__sessions)}"
            )

        return len(expired)
