"""In-memory CHIP-8 devices: display, keypad and buzzer.

The processor only talks to these through a few methods, so a windowed
frontend can substitute its own objects with the same shape.
"""

import queue
import threading
from typing import Optional, Sequence

import jax.numpy as jnp

from chip8core.constants import NUM_KEYS, SCREEN_HEIGHT, SCREEN_WIDTH, SPRITE_WIDTH

_columns = jnp.arange(SPRITE_WIDTH)


class FrameBuffer:
    """64x32 monochrome display buffer indexed ``[x, y]``."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = jnp.zeros((width, height), dtype=jnp.bool_)

    def clear(self):
        self.pixels = jnp.zeros_like(self.pixels)

    def blit(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR ``rows`` onto the buffer at (x, y), wrapping at the edges.

        Returns True if any pixel went from set to clear.
        """
        if len(rows) == 0:
            return False
        rows = jnp.asarray(rows, dtype=jnp.uint8)
        sprite = ((rows[:, None] >> (7 - _columns)[None, :]) & 1).astype(jnp.bool_)

        xs = (x + _columns)[None, :] % self.width
        ys = (y + jnp.arange(len(rows)))[:, None] % self.height
        xs, ys = jnp.broadcast_arrays(xs, ys)

        current = self.pixels[xs, ys]
        self.pixels = self.pixels.at[xs, ys].set(current ^ sprite)
        return bool(jnp.any(current & sprite))

    def lit(self) -> int:
        """Number of pixels currently set."""
        return int(jnp.sum(self.pixels))

    def to_text(self, on: str = "#", off: str = ".") -> str:
        pixels = self.pixels.tolist()
        return "\n".join(
            "".join(on if pixels[x][y] else off for x in range(self.width))
            for y in range(self.height)
        )


class Keypad:
    """Sixteen-key hex keypad shared between a frontend and the processor.

    ``press`` and ``release`` may be called from any thread. Each transition
    from released to pressed is also queued as an event for ``LD Vx, K``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pressed = [False] * NUM_KEYS
        self._events: "queue.Queue[int]" = queue.Queue()

    @staticmethod
    def _check(key: int):
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in [0, {NUM_KEYS - 1}], got {key}")

    def press(self, key: int):
        self._check(key)
        with self._lock:
            was_pressed = self._pressed[key]
            self._pressed[key] = True
        if not was_pressed:
            self._events.put(key)

    def release(self, key: int):
        self._check(key)
        with self._lock:
            self._pressed[key] = False

    def release_all(self):
        with self._lock:
            self._pressed = [False] * NUM_KEYS

    def is_pressed(self, value: int) -> bool:
        """Whether the key named by ``value`` is down; values above 0xF name no key."""
        if not 0 <= value < NUM_KEYS:
            return False
        with self._lock:
            return self._pressed[value]

    def snapshot(self) -> jnp.ndarray:
        with self._lock:
            return jnp.array(self._pressed, dtype=jnp.bool_)

    def wait_for_press(self, timeout: Optional[float] = None) -> Optional[int]:
        """Next key press event, or None if ``timeout`` elapses first."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def clear_events(self):
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                return


class Buzzer:
    """Audio collaborator that records sound-timer transitions."""

    def __init__(self, logger=None):
        self.logger = logger
        self.active = False
        self.transitions = 0

    def on_sound(self, active: bool):
        self.active = active
        self.transitions += 1
        if self.logger is not None:
            self.logger.debug(f"Tone {'on' if active else 'off'}")
