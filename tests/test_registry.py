from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import middlechain
from middlechain import ChainSettings, Layers, Registry
from tests.helpers import Request, ResponseRecorder, final, one, serve, stop, two, wrapper1


def test_registry_starts_empty() -> None:
    layers = Registry().snapshot()

    assert layers == Layers()
    assert layers.before == ()
    assert layers.after == ()
    assert layers.wrapper is None


def test_registry_appends_in_registration_order() -> None:
    registry = Registry()
    registry.use_before(one)
    registry.use_before(two, stop)
    registry.use_after(two)
    registry.use_wrap(wrapper1)

    layers = registry.snapshot()
    assert layers.before == (one, two, stop)
    assert layers.after == (two,)
    assert layers.wrapper is wrapper1


def test_snapshot_is_not_changed_by_later_registration() -> None:
    registry = Registry()
    registry.use_before(one)
    before = registry.snapshot()

    registry.use_before(two)

    assert before.before == (one,)
    assert registry.snapshot().before == (one, two)


def test_chain_global_setters_mutate_shared_registry() -> None:
    chain = middlechain.new()
    result = chain.use_before(one)

    assert result is None
    assert chain.registry.snapshot().before == (one,)


def test_registry_logs_registrations(log_messages: list[str]) -> None:
    registry = Registry()
    registry.use_before(one, two)
    registry.use_wrap(wrapper1)

    assert any("global before += one, two" in m for m in log_messages)
    assert any("global wrapper = wrapper1" in m for m in log_messages)


def test_concurrent_registration_keeps_every_step() -> None:
    registry = Registry()
    barrier = threading.Barrier(4)

    def register(_: int) -> None:
        barrier.wait()
        for _ in range(100):
            registry.use_before(one)

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(register, range(4)))

    assert len(registry.snapshot().before) == 400


def test_concurrent_invocations_of_one_handler() -> None:
    m = middlechain.new()
    m.use_before(one)
    handler = m.before(two).wrap(wrapper1).then(final)

    def invoke(_: int) -> str:
        return serve(handler)

    with ThreadPoolExecutor(max_workers=8) as pool:
        bodies = list(pool.map(invoke, range(200)))

    assert set(bodies) == {"one two wrapper1_start final wrapper1_end"}


def test_abort_is_logged_with_scope_and_step(log_messages: list[str]) -> None:
    handler = middlechain.new().before(one, stop).then(final)
    handler(ResponseRecorder(), Request())

    assert any("final aborted at route_before step stop" in m for m in log_messages)


def test_abort_logging_can_be_disabled(log_messages: list[str]) -> None:
    chain = middlechain.new(settings=ChainSettings(log_aborts=False))
    chain.before(stop).then(final)(ResponseRecorder(), Request())

    assert not any("aborted" in m for m in log_messages)


def test_trace_steps_logs_every_step(log_messages: list[str]) -> None:
    chain = middlechain.new(settings=ChainSettings(trace_steps=True))
    chain.use_before(one)
    chain.after(two).then(final)(ResponseRecorder(), Request())

    traces = [m for m in log_messages if m.startswith("TRACE|final")]
    assert traces == [
        "TRACE|final global_before -> one",
        "TRACE|final route_after -> two",
    ]


def test_steps_are_not_traced_by_default(log_messages: list[str]) -> None:
    middlechain.new().before(one).then(final)(ResponseRecorder(), Request())

    assert not any(m.startswith("TRACE|final") for m in log_messages)
