from __future__ import annotations

from cqlstamp.infrastructure.timestamps import PinnedTimestampGenerator

PINNED = 1_700_000_000_000_000
OUTER = 1_600_000_000_000_000
FALLBACK = 42


def test_generator_falls_back_when_nothing_is_pinned() -> None:
    generator = PinnedTimestampGenerator(fallback=lambda: FALLBACK)
    assert generator.pinned is None
    assert generator() == FALLBACK


def test_generator_returns_pinned_value_until_unpinned() -> None:
    generator = PinnedTimestampGenerator(fallback=lambda: FALLBACK)
    generator.pin(PINNED)
    assert generator() == PINNED
    assert generator() == PINNED
    generator.unpin()
    assert generator() == FALLBACK


def test_default_fallback_is_monotonic() -> None:
    generator = PinnedTimestampGenerator()
    first = generator()
    second = generator()
    assert second > first


def test_pinned_timestamp_block_restores_previous_state(fake_harness) -> None:
    timestamps = fake_harness.timestamps
    with fake_harness.pinned_timestamp(OUTER):
        assert timestamps() == OUTER
        with fake_harness.pinned_timestamp(PINNED):
            assert timestamps() == PINNED
        assert timestamps() == OUTER
    assert timestamps.pinned is None


def test_pinned_timestamp_none_leaves_generator_alone(fake_harness) -> None:
    with fake_harness.pinned_timestamp(None):
        assert fake_harness.timestamps.pinned is None


def test_pinned_timestamp_unpins_on_error(fake_harness) -> None:
    try:
        with fake_harness.pinned_timestamp(PINNED):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert fake_harness.timestamps.pinned is None


def test_close_is_idempotent(fake_harness) -> None:
    fake_harness.close()
    fake_harness.close()
    assert fake_harness.closed is True
    assert fake_harness.cluster.shutdown_calls == 1
