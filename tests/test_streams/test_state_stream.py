"""Tests for observable state streams."""

import asyncio
import threading

import pytest

from bandconnect.streams import StateStream, combine


def test_subscribe_receives_initial_value():
    stream = StateStream(1)
    received = []
    stream.subscribe(received.append)
    assert received == [1]


def test_one_emission_per_set_in_order():
    stream = StateStream(0)
    received = []
    stream.subscribe(received.append)
    for i in range(1, 5):
        stream.set(i)
    assert received == [0, 1, 2, 3, 4]
    assert stream.value == 4


def test_update_returns_new_value():
    stream = StateStream((1,))
    assert stream.update(lambda v: v + (2,)) == (1, 2)
    assert stream.value == (1, 2)


def test_close_stops_delivery():
    stream = StateStream("a")
    received = []
    sub = stream.subscribe(received.append)
    sub.close()
    sub.close()
    stream.set("b")
    assert received == ["a"]
    assert sub.closed
    assert stream.subscriber_count == 0


def test_subscription_context_manager():
    stream = StateStream(0)
    received = []
    with stream.subscribe(received.append):
        stream.set(1)
    stream.set(2)
    assert received == [0, 1]


def test_reentrant_set_keeps_order_for_every_subscriber():
    stream = StateStream(0)
    first, second = [], []

    def bump(value):
        first.append(value)
        if value == 1:
            stream.set(2)

    stream.subscribe(bump)
    stream.subscribe(second.append)
    stream.set(1)

    assert first == [0, 1, 2]
    assert second == [0, 1, 2]


def test_failing_callback_does_not_block_others(caplog):
    stream = StateStream(0)
    received = []

    def boom(value):
        if value:
            raise RuntimeError("bad subscriber")

    stream.subscribe(boom)
    stream.subscribe(received.append)
    stream.set(1)

    assert received == [0, 1]
    assert "Subscriber callback failed" in caplog.text


def test_map_recomputes_on_delivery():
    stream = StateStream([3, 1, 2])
    derived = stream.map(sorted)
    received = []
    derived.subscribe(received.append)
    stream.set([5, 4])
    assert received == [[1, 2, 3], [4, 5]]
    assert derived.value == [4, 5]


def test_combine_waits_for_all_sources():
    names = StateStream({"u1": "Ann"})
    counts = StateStream(0)
    combined = combine(names, counts, fn=lambda n, c: (len(n), c))
    received = []
    sub = combined.subscribe(received.append)

    assert received == [(1, 0)]
    counts.set(3)
    names.set({})
    assert received == [(1, 0), (1, 3), (0, 3)]
    assert combined.value == (0, 3)

    sub.close()
    assert sub.closed
    counts.set(4)
    assert len(received) == 3


def test_concurrent_updates_are_not_lost():
    stream = StateStream(())

    def writer(tag):
        for i in range(200):
            stream.update(lambda v: v + ((tag, i),))

    threads = [threading.Thread(target=writer, args=(t,)) for t in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(stream.value) == 800


def test_watch_yields_initial_and_subsequent_values():
    stream = StateStream("a")

    async def consume():
        seen = []
        watcher = stream.watch()
        seen.append(await watcher.__anext__())
        stream.set("b")
        seen.append(await watcher.__anext__())
        await watcher.aclose()
        return seen

    assert asyncio.run(consume()) == ["a", "b"]
    assert stream.subscriber_count == 0


def test_stream_base_is_abstract():
    from bandconnect.streams import Stream
    with pytest.raises(TypeError):
        Stream()


def test_combine_last_delivery_matches_final_sources_across_threads():
    left = StateStream(0)
    right = StateStream(0)
    combined = combine(left, right, fn=lambda a, b: (a, b))
    received = []
    combined.subscribe(received.append)

    def writer(stream):
        for i in range(1, 301):
            stream.set(i)

    threads = [threading.Thread(target=writer, args=(s,)) for s in (left, right)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert received[-1] == (300, 300)
    # each side only ever moves forward in the delivered sequence
    for side in (0, 1):
        values = [pair[side] for pair in received]
        assert values == sorted(values)


def test_combine_reentrant_emission_keeps_order():
    left = StateStream(0)
    right = StateStream(0)
    received = []

    def on_pair(pair):
        received.append(pair)
        if pair == (1, 0):
            right.set(1)

    combine(left, right, fn=lambda a, b: (a, b)).subscribe(on_pair)
    left.set(1)
    assert received == [(0, 0), (1, 0), (1, 1)]
