"""Tests for the delay/sound timers and the timer clock."""

import time

import pytest
from chip8core import TimerClock, TimerRegisters, Buzzer


class TestTimerRegisters:
    def test_tick_decrements_both(self):
        timers = TimerRegisters()
        timers.set_delay(3)
        timers.set_sound(2)

        timers.tick()

        assert timers.delay == 2
        assert timers.sound == 1

    def test_never_below_zero(self):
        timers = TimerRegisters()
        timers.set_delay(1)
        for _ in range(5):
            timers.tick()
        assert timers.delay == 0
        assert timers.sound == 0

    def test_values_are_bytes(self):
        timers = TimerRegisters()
        timers.set_delay(0x1FF)
        assert timers.delay == 0xFF


class TestSoundTransitions:
    def test_buzzer_follows_sound_timer(self):
        buzzer = Buzzer()
        timers = TimerRegisters(on_sound=buzzer.on_sound)

        timers.set_sound(2)
        assert buzzer.active
        assert timers.sound_active

        timers.tick()
        assert buzzer.active
        timers.tick()
        assert not buzzer.active
        assert buzzer.transitions == 2

    def test_rewriting_active_timer_does_not_retrigger(self):
        buzzer = Buzzer()
        timers = TimerRegisters(on_sound=buzzer.on_sound)
        timers.set_sound(5)
        timers.set_sound(9)
        assert buzzer.transitions == 1

    def test_setting_zero_stops_tone(self):
        buzzer = Buzzer()
        timers = TimerRegisters(on_sound=buzzer.on_sound)
        timers.set_sound(5)
        timers.set_sound(0)
        assert not buzzer.active


class TestTimerClock:
    def test_rejects_bad_rate(self):
        with pytest.raises(ValueError):
            TimerClock(TimerRegisters(), hz=0)

    def test_counts_down_in_real_time(self):
        """A delay of N reaches zero after about N/60 seconds."""
        timers = TimerRegisters()
        timers.set_delay(12)

        with TimerClock(timers) as clock:
            assert clock.running
            time.sleep(0.1)
            assert 0 < timers.delay < 12
            time.sleep(0.4)

        assert timers.delay == 0
        assert not clock.running

    def test_stop_is_idempotent(self):
        clock = TimerClock(TimerRegisters())
        clock.stop()
        clock.start()
        clock.start()
        clock.stop()
        clock.stop()
        assert not clock.running
