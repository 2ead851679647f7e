"""Sequential connection handling with callback-style streams.

``dispatch.callback`` turns a coroutine into a plain callback, so it can be
registered with an API that expects one. Each connection runs its own
coroutine; reads and the artificial delay below are written as straight-line
code instead of nested callbacks.

Run with: uv run python examples/echo_server.py
Then: nc 127.0.0.1 7887
"""

import asyncio
import logging

from resumable import dispatch

logger = logging.getLogger(__name__)


def read_line(reader: asyncio.StreamReader, completion) -> asyncio.Future:
    """Callback-style wrapper around ``reader.readline``."""

    def _on_done(task: asyncio.Task) -> None:
        if task.cancelled():
            completion(ConnectionAbortedError("read cancelled"))
        elif task.exception() is not None:
            completion(task.exception())
        else:
            completion(None, task.result())

    task = asyncio.ensure_future(reader.readline())
    task.add_done_callback(_on_done)
    return task


def handle_connection(reader, writer, resume):
    loop = asyncio.get_running_loop()
    peer = writer.get_extra_info("peername")
    logger.info(f"connection from {peer}")

    while True:
        read_line(reader, resume())
        try:
            line = yield
        except ConnectionError:
            break
        if not line:
            break

        loop.call_later(0.5, resume())
        yield
        writer.write(b"echo: " + line)

    writer.close()
    logger.info(f"connection from {peer} closed")


async def main() -> None:
    server = await asyncio.start_server(dispatch.callback(handle_connection), "127.0.0.1", 7887)
    async with server:
        await server.serve_forever()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
