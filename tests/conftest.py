"""Shared fixtures for harness tests."""

import threading
import time

import pytest
from prometheus_client import CollectorRegistry

from lk_harness import HarnessMetrics


FIXED_NOW = 1_700_000_000


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same unix time."""
    return lambda: FIXED_NOW


@pytest.fixture
def metrics():
    """Metrics on a private registry."""
    return HarnessMetrics(CollectorRegistry())


@pytest.fixture
def sleeper():
    """Work that runs until stopped (or for at most 5 seconds)."""
    started = threading.Event()

    def work(stop: threading.Event):
        started.set()
        stop.wait(5)

    work.started = started
    return work


@pytest.fixture
def slow_work():
    """Work that ignores the stop event and sleeps for a second."""
    def work(stop):
        time.sleep(1)
    return work


@pytest.fixture
def counter_value():
    """Read a counter sample from a metrics registry."""
    def read(harness_metrics: HarnessMetrics, name: str) -> float:
        value = harness_metrics.registry.get_sample_value(name)
        return 0.0 if value is None else value
    return read
