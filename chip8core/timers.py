"""CHIP-8 delay and sound timers.

The two timer registers are the only processor fields written from a second
thread, so they live outside the immutable emulator state behind their own
lock. ``TimerClock`` ticks them at a fixed rate independent of instruction
throughput.
"""

import threading
import time
from typing import Callable, Optional

from chip8core.constants import TIMER_HZ

SoundCallback = Callable[[bool], None]


class TimerRegisters:
    """Lock-guarded delay and sound timers."""

    def __init__(self, on_sound: Optional[SoundCallback] = None):
        self._lock = threading.Lock()
        self._delay = 0
        self._sound = 0
        self.on_sound = on_sound

    @property
    def delay(self) -> int:
        with self._lock:
            return self._delay

    @property
    def sound(self) -> int:
        with self._lock:
            return self._sound

    @property
    def sound_active(self) -> bool:
        return self.sound > 0

    def set_delay(self, value: int):
        with self._lock:
            self._delay = value & 0xFF

    def set_sound(self, value: int):
        with self._lock:
            was_active = self._sound > 0
            self._sound = value & 0xFF
            now_active = self._sound > 0
        if was_active != now_active:
            self._notify(now_active)

    def tick(self):
        """Decrement both timers by one, stopping at zero."""
        with self._lock:
            if self._delay > 0:
                self._delay -= 1
            sound_stopped = self._sound == 1
            if self._sound > 0:
                self._sound -= 1
        if sound_stopped:
            self._notify(False)

    def reset(self):
        self.set_delay(0)
        self.set_sound(0)

    def _notify(self, active: bool):
        if self.on_sound is not None:
            self.on_sound(active)


class TimerClock:
    """Background thread ticking ``TimerRegisters`` at ``hz``.

    Ticks are scheduled against ``time.perf_counter`` so a slow tick does not
    drift the cadence; if the thread falls more than a second behind it drops
    the backlog instead of bursting.
    """

    def __init__(self, timers: TimerRegisters, hz: float = TIMER_HZ):
        if hz <= 0:
            raise ValueError(f"Timer rate must be positive, got {hz}")
        self.timers = timers
        self.period = 1.0 / hz
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="chip8-timers", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self):
        next_tick = time.perf_counter() + self.period
        while not self._stop.wait(max(0.0, next_tick - time.perf_counter())):
            self.timers.tick()
            next_tick += self.period
            now = time.perf_counter()
            if now - next_tick > 1.0:
                next_tick = now + self.period

    def __enter__(self) -> "TimerClock":
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
