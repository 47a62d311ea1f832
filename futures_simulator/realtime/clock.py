"""
Fixed-cadence asyncio clock driving the simulation.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional


class SimulationClock:
    """Calls a tick function every ``interval`` seconds until stopped"""

    def __init__(self, tick_fn: Callable[[], Any], interval: float = 0.6):
        if interval < 0:
            raise ValueError("Tick interval cannot be negative")
        if not callable(tick_fn):
            raise ValueError("Tick function must be callable")

        self.tick_fn = tick_fn
        self.interval = interval
        self.is_running = False
        self.start_time: Optional[datetime] = None
        self.tick_callbacks: List[Callable[[Any], None]] = []
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

        self.stats = {
            'ticks_fired': 0,
            'callback_errors': 0,
            'task_errors': 0,
            'uptime_seconds': 0.0
        }

        self.logger = logging.getLogger(__name__)

    def register_tick_callback(self, callback: Callable[[Any], None]):
        """Register callback receiving each tick's result"""
        if not callable(callback):
            raise ValueError("Callback must be callable")
        self.tick_callbacks.append(callback)

    def _notify(self, result: Any):
        for callback in self.tick_callbacks:
            try:
                callback(result)
            except Exception as e:
                self.stats['callback_errors'] += 1
                self.logger.error(f"Error in tick callback: {e}")

    async def run(self, max_ticks: Optional[int] = None):
        """
        Tick until ``stop()`` is called or ``max_ticks`` ticks have fired.

        Ticks are scheduled against the loop clock, so a slow consumer does not
        shift later ticks; nothing is skipped or coalesced. A loop left over
        from a stopped run exits at its next wake-up even if the clock has
        been started again in the meantime.
        """
        if self.is_running:
            self.logger.warning("Clock is already running")
            return

        self.logger.info(f"Starting simulation clock ({self.interval * 1000:.0f} ms ticks)")
        self._generation += 1
        generation = self._generation
        self.is_running = True
        self.start_time = datetime.now()
        loop = asyncio.get_running_loop()
        next_tick_at = loop.time()
        fired = 0

        try:
            while self.is_running and generation == self._generation:
                result = self.tick_fn()
                fired += 1
                self.stats['ticks_fired'] += 1
                self._notify(result)

                if max_ticks is not None and fired >= max_ticks:
                    break

                next_tick_at += self.interval
                await asyncio.sleep(max(0.0, next_tick_at - loop.time()))
        except Exception as e:
            self.logger.error(f"Simulation tick failed: {e}")
            raise
        finally:
            # A restarted clock owns the flag from here on
            if generation == self._generation:
                self.is_running = False
                self.stats['uptime_seconds'] = (datetime.now() - self.start_time).total_seconds()
            self.logger.info(f"Simulation clock stopped after {fired} tick(s)")

    def start(self, max_ticks: Optional[int] = None) -> asyncio.Task:
        """Schedule ``run`` on the running event loop"""
        self._task = asyncio.get_running_loop().create_task(self.run(max_ticks))
        self._task.add_done_callback(self._on_task_done)
        return self._task

    @property
    def task(self) -> Optional[asyncio.Task]:
        """Task created by the most recent ``start()``"""
        return self._task

    def _on_task_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.stats['task_errors'] += 1
            self.logger.error(f"Simulation clock task ended with error: {error!r}")

    def stop(self):
        """Stop ticking; the loop exits at its next wake-up"""
        if not self.is_running:
            self.logger.warning("Clock is not running")
            return
        self.is_running = False
