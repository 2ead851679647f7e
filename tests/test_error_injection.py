"""Errors delivered to completions and errors escaping coroutines."""

import asyncio

import pytest

from resumable import Driver, InjectedError, TickLoop, dispatch


class TestLocalRecovery:
    def test_injected_exception_is_recoverable_at_suspension_point(self, loop, done):
        def job(resume):
            loop.call_soon(resume(), RuntimeError("boom"))
            try:
                yield
            except RuntimeError as exc:
                recovered = str(exc)
            else:
                recovered = None
            loop.call_soon(resume(), None, "after")
            after = yield
            return recovered, after

        dispatch(job, done, defer=loop.call_soon)
        loop.run()

        assert done.value == ("boom", "after")

    def test_non_exception_error_value_is_wrapped(self, loop, done):
        def job(resume):
            loop.call_soon(resume(), "ENOENT")
            try:
                yield
            except InjectedError as exc:
                return exc.reason

        dispatch(job, done, defer=loop.call_soon)
        loop.run()

        assert done.value == "ENOENT"

    def test_retry_loop_is_ordinary_sequential_logic(self, loop, done):
        outcomes = iter([ConnectionError("reset"), ConnectionError("reset"), None])

        def flaky_fetch(completion):
            error = next(outcomes)
            if error is None:
                loop.call_later(0.01, completion, None, "payload")
            else:
                loop.call_later(0.01, completion, error)

        def job(resume):
            attempts = 0
            while True:
                attempts += 1
                flaky_fetch(resume())
                try:
                    payload = yield
                except ConnectionError:
                    continue
                return payload, attempts

        dispatch(job, done, defer=loop.call_soon)
        loop.run()

        assert done.value == ("payload", 3)


class TestUncaughtErrors:
    def test_uncaught_error_escapes_to_host(self, loop, done):
        def job(resume):
            loop.call_soon(resume(), ValueError("boom"))
            yield
            return "unreachable"

        driver = Driver(job, callback=done, defer=loop.call_soon)
        driver.start()

        with pytest.raises(ValueError, match="boom"):
            loop.run()
        assert driver.state == "failed"
        assert done.calls == []

    def test_host_exception_handler_receives_uncaught_error(self, done):
        escaped: list[BaseException] = []
        host = TickLoop(exception_handler=escaped.append)

        def job(resume):
            host.call_soon(resume(), KeyError("lost"))
            yield

        dispatch(job, done, defer=host.call_soon)
        host.run()

        assert len(escaped) == 1
        assert isinstance(escaped[0], KeyError)
        assert done.calls == []

    def test_error_raised_before_first_suspension_is_synchronous(self, loop, done):
        def job(resume):
            raise LookupError("early")
            yield

        with pytest.raises(LookupError, match="early"):
            dispatch(job, done, defer=loop.call_soon)
        assert done.calls == []

    @pytest.mark.asyncio
    async def test_uncaught_error_reaches_asyncio_exception_handler(self):
        loop = asyncio.get_running_loop()
        reported: list[dict] = []
        previous = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        try:

            def job(resume):
                loop.call_later(0.01, resume(), RuntimeError("async boom"))
                yield

            dispatch(job)
            await asyncio.sleep(0.05)
        finally:
            loop.set_exception_handler(previous)

        assert len(reported) == 1
        assert isinstance(reported[0]["exception"], RuntimeError)
        assert str(reported[0]["exception"]) == "async boom"
