import asyncio

from twitchcmd.core.events import EventHub


async def test_sync_and_async_listeners_receive_args():
    hub = EventHub()
    seen = []

    async def async_listener(value):
        await asyncio.sleep(0)
        seen.append(("async", value))

    hub.on("ping", lambda value: seen.append(("sync", value)))
    hub.on("ping", async_listener)
    hub.emit("ping", 1)
    await hub.drain()

    assert seen == [("sync", 1), ("async", 1)]


async def test_failing_listener_does_not_stop_others():
    hub = EventHub()
    seen = []

    def broken(_):
        raise RuntimeError("boom")

    hub.on("ping", broken)
    hub.on("ping", seen.append)
    hub.emit("ping", "x")

    assert seen == ["x"]


async def test_decorator_and_off():
    hub = EventHub()
    seen = []

    @hub.on("ping")
    def listener(value):
        seen.append(value)

    hub.emit("ping", 1)
    hub.off("ping", listener)
    hub.emit("ping", 2)
    hub.off("ping", listener)

    assert seen == [1]
