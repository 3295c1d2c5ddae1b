"""Periodic monster attacks.

Each spawned monster gets one asyncio task that wakes up every
``interval_seconds`` and attacks a random conscious player through the
same ``GameEngine.monster_attack`` any other caller uses. The task ends
itself when its game or monster is gone, when nobody is left to attack,
or when the attack raises.
"""

from __future__ import annotations

import asyncio
import contextlib
import random
from collections.abc import Awaitable, Callable

from dnd_engine.core.exceptions import DndEngineError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.controller import GameEngine


logger = get_logger(__name__)

TaskKey = tuple[str, str]
StateChanged = Callable[[str], Awaitable[None]]


class MonsterAIScheduler:
    """Owns one cancellable attack loop per (game id, monster instance id).

    Example:
        >>> scheduler = MonsterAIScheduler(engine, interval_seconds=15.0)
        >>> scheduler.schedule("g1", monster.instance_id)
        >>> await scheduler.cancel_all()
    """

    def __init__(
        self,
        engine: GameEngine,
        *,
        interval_seconds: float,
        on_state_changed: StateChanged | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.engine = engine
        self.interval_seconds = interval_seconds
        self.on_state_changed = on_state_changed
        self._rng = rng or random.Random()
        self._tasks: dict[TaskKey, asyncio.Task[None]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def schedule(self, game_id: str, instance_id: str) -> asyncio.Task[None]:
        """Start the attack loop for a monster, replacing any stale loop.

        Must be called from a running event loop.
        """
        key = (game_id, instance_id)
        stale = self._tasks.pop(key, None)
        if stale is not None:
            stale.cancel()
        task = asyncio.create_task(self._run(key), name=f"monster-ai:{game_id}:{instance_id}")
        self._tasks[key] = task
        logger.debug("Monster AI scheduled", game_id=game_id, instance_id=instance_id)
        return task

    def cancel(self, game_id: str, instance_id: str) -> bool:
        """Cancel one loop. Returns False if none was running."""
        task = self._tasks.pop((game_id, instance_id), None)
        if task is None:
            return False
        task.cancel()
        return True

    async def cancel_all(self) -> None:
        """Cancel every loop and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if tasks:
            logger.info("Monster AI stopped", tasks=len(tasks))

    def tick(self, game_id: str, instance_id: str) -> bool:
        """Run one attack. Returns False when the loop should stop."""
        engine = self.engine
        if engine.registry.get_monster(game_id, instance_id) is None:
            logger.info("Monster gone, stopping AI", game_id=game_id, instance_id=instance_id)
            return False
        targets = engine.eligible_targets(game_id)
        if not targets:
            logger.info("No eligible targets, stopping AI", game_id=game_id, instance_id=instance_id)
            return False
        target = self._rng.choice(targets)
        try:
            engine.monster_attack(game_id, instance_id, target.id)
        except DndEngineError as exc:
            logger.warning(
                "Monster AI error",
                game_id=game_id,
                instance_id=instance_id,
                error=str(exc),
            )
            return False
        return True

    async def _run(self, key: TaskKey) -> None:
        game_id, instance_id = key
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                if not self.tick(game_id, instance_id):
                    break
                if self.on_state_changed is not None:
                    await self.on_state_changed(game_id)
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]


__all__ = ["MonsterAIScheduler"]
