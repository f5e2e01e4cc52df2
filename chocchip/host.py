#!/usr/bin/env python3

"""
Host Loop

Drives the CPU in real time.  Three things happen at different rates:
    * Instructions run at the chosen clock speed (or as fast as possible).
    * The delay and sound timers tick down at a fixed 60Hz, whatever the clock
      speed, so games run at the correct pace on any host.
    * Inputs are polled and the screen is presented at 60Hz, and only if the
      framebuffer has changed.

A ROM waiting for a keypress (Fx0A) simply keeps re-running the same
instruction, so timers keep ticking and the window stays responsive while it
waits.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from time import perf_counter
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, MAX_TIMER_CATCHUP, TIMER_FREQ

DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
TIMER_INTERVAL = 1.0 / TIMER_FREQ

logger = logging.getLogger(__name__)


class Host:
    def __init__(self, cpu, framebuffer, renderer, inputs, clock_speed=None, clock=None):
        self.cpu = cpu
        self.framebuffer = framebuffer
        self.renderer = renderer
        self.inputs = inputs
        self.clock = perf_counter if clock is None else clock

        # User can specify 0 for uncapped
        auto_clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.core_interval = None if auto_clock_speed <= 0 else 1.0 / auto_clock_speed

        # Timing and performance-related vars
        self.next_display_update_time = 0
        self.next_timer_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

        width, height = framebuffer.get_vid_size()
        self.renderer.set_resolution(width, height)
        self.report_perf()

    def run(self):
        # Runs until the input plugin asks to quit.  CPU errors propagate to the caller.
        clock = self.clock
        start_time = clock()
        self.next_timer_time = start_time + TIMER_INTERVAL
        logger.info(
            "Running at %s operations/second",
            "uncapped" if self.core_interval is None else round(1.0 / self.core_interval)
        )

        while True:
            this_time = clock()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    return

                self.next_display_update_time = this_time + DISPLAY_INTERVAL

                if self.refresh_display():
                    self.perf_counter_fps += 1

            self.service_timers(this_time)
            self.cpu.cycle()
            self.perf_counter_ops += 1

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while clock() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

    def step(self, cycles=1):
        # Run a fixed number of instructions with no timing, polling or rendering
        for _ in range(cycles):
            self.cpu.cycle()

    def service_timers(self, this_time):
        # Apply one timer tick per 1/60th of a second elapsed since the last one
        ticks = 0

        while this_time >= self.next_timer_time and ticks < MAX_TIMER_CATCHUP:
            self.cpu.tick_timers()
            self.next_timer_time += TIMER_INTERVAL
            ticks += 1

        if this_time >= self.next_timer_time:
            # Too far behind (host stalled), so drop the missed ticks rather than racing to catch up
            self.next_timer_time = this_time + TIMER_INTERVAL

        return ticks

    def refresh_display(self):
        return self.framebuffer.present(self.renderer)

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))
