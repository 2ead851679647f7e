"""
Fan-out / fan-in: several operations issued before suspending.

Results are delivered in completion order, which callers must not rely on, so
these tests compare collected results as sets.
"""

import asyncio
import time

import pytest

from resumable import Driver, TickLoop, dispatch


def fan_out(host, delays, resume):
    for delay in delays:
        host.call_later(delay, resume(), None, delay)
    collected = []
    for _ in delays:
        collected.append((yield))
    return collected


class TestFanOutVirtualTime:
    def test_batch_takes_as_long_as_slowest_operation(self, loop, done):
        driver = Driver(fan_out, (loop, (0.010, 0.020, 0.030)), callback=done, defer=loop.call_soon)

        driver.start()
        loop.run()

        assert loop.time() == pytest.approx(0.030)
        assert set(done.value) == {0.010, 0.020, 0.030}
        assert driver.steps == 4

    def test_sequential_issue_of_same_operations_takes_their_sum(self, loop, done):
        def sequential(resume):
            collected = []
            for delay in (0.010, 0.020, 0.030):
                loop.call_later(delay, resume(), None, delay)
                collected.append((yield))
            return collected

        dispatch(sequential, done, defer=loop.call_soon)
        loop.run()

        assert loop.time() == pytest.approx(0.060)
        assert done.value == [0.010, 0.020, 0.030]

    def test_each_suspension_consumes_exactly_one_completion(self, loop, done):
        def partial(resume):
            for delay in (0.01, 0.02, 0.03):
                loop.call_later(delay, resume(), None, delay)
            first = yield
            second = yield
            loop.call_later(0.05, resume(), None, "late")
            third = yield
            fourth = yield
            return {first, second}, {third, fourth}

        dispatch(partial, done, defer=loop.call_soon)
        loop.run()

        early, late = done.value
        assert early == {0.01, 0.02}
        assert late == {0.03, "late"}

    def test_result_multiset_is_complete_regardless_of_issue_order(self, done):
        delays = (0.03, 0.01, 0.02)
        loop = TickLoop()

        dispatch(fan_out, loop, delays, done, defer=loop.call_soon)
        loop.run()

        assert sorted(done.value) == sorted(delays)


class TestFanOutAsyncio:
    @pytest.mark.asyncio
    async def test_batch_wall_clock_is_bounded_by_slowest_operation(self):
        loop = asyncio.get_running_loop()
        finished = loop.create_future()
        delays = (0.05, 0.10, 0.15)

        started = time.perf_counter()
        dispatch(fan_out, loop, delays, lambda err, value: finished.set_result(value))
        collected = await asyncio.wait_for(finished, timeout=2.0)
        elapsed = time.perf_counter() - started

        assert set(collected) == set(delays)
        assert elapsed >= 0.14
        assert elapsed < sum(delays)
