"""Test fixtures package."""

from tests.fixtures.cache_fixtures import (
    FailingStore,
    FakeClock,
    FakeProducer,
    MemoryStore,
    fake_clock,
    fake_producer,
    memory_store,
)

__all__ = [
    "FakeClock",
    "MemoryStore",
    "FailingStore",
    "FakeProducer",
    "fake_clock",
    "memory_store",
    "fake_producer",
]
