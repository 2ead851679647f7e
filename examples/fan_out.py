"""Fan-out / fan-in with resume tokens on asyncio.

Ten timers are started without suspending in between, then the coroutine
yields once per outstanding timer. The whole batch takes as long as the slowest
timer (about one second), not the sum of all of them. Results arrive in
completion order.

Run with: uv run python examples/fan_out.py
"""

import asyncio
import time

from resumable import dispatch


def wait_for_all(count, resume):
    loop = asyncio.get_running_loop()
    for i in range(count):
        loop.call_later(0.1 * (i + 1), resume(), None, i)

    finished = []
    for _ in range(count):
        finished.append((yield))
    return finished


async def main() -> None:
    loop = asyncio.get_running_loop()
    done = loop.create_future()

    started = time.perf_counter()
    dispatch(wait_for_all, 10, lambda err, value: done.set_result(value))
    finished = await done

    print(f"finished {finished} in {time.perf_counter() - started:.2f}s")


if __name__ == "__main__":
    asyncio.run(main())
