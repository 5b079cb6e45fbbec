"""
Tests for the per-repository provisioning guard.
"""

import threading

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.guard import ProvisioningGuard


def test_acquire_and_release() -> None:
    guard = ProvisioningGuard()

    assert guard.try_acquire("payments-api") is True
    assert guard.is_held("payments-api")
    assert guard.try_acquire("payments-api") is False

    guard.release("payments-api")

    assert not guard.is_held("payments-api")
    assert guard.try_acquire("payments-api") is True


def test_names_are_independent() -> None:
    guard = ProvisioningGuard()

    assert guard.try_acquire("payments-api")
    assert guard.try_acquire("billing-api")


@given(name=st.from_regex(r"[a-z][a-z0-9-]{2,20}", fullmatch=True))
@settings(max_examples=50)
def test_names_compare_case_insensitively(name: str) -> None:
    """
    Property: Case-insensitive exclusion

    Holding a name also excludes every differently-cased spelling of it.
    """
    guard = ProvisioningGuard()

    assert guard.try_acquire(name)
    assert not guard.try_acquire(name.upper())


def test_release_of_unheld_name_is_a_no_op() -> None:
    ProvisioningGuard().release("never-held")


def test_hold_raises_when_busy() -> None:
    guard = ProvisioningGuard()
    guard.try_acquire("payments-api")

    with pytest.raises(ClassifiedError) as exc_info:
        with guard.hold("payments-api"):
            pass

    assert exc_info.value.kind is ErrorKind.PROVISIONING_IN_PROGRESS
    # The rejected caller must not release the holder's lock.
    assert guard.is_held("payments-api")


def test_hold_releases_on_error() -> None:
    guard = ProvisioningGuard()

    with pytest.raises(RuntimeError):
        with guard.hold("payments-api"):
            raise RuntimeError("boom")

    assert not guard.is_held("payments-api")


def test_concurrent_acquire_has_single_winner() -> None:
    guard = ProvisioningGuard()
    threads_count = 16
    barrier = threading.Barrier(threads_count)
    results: list[bool] = []
    results_lock = threading.Lock()

    def contend() -> None:
        barrier.wait()
        acquired = guard.try_acquire("payments-api")
        with results_lock:
            results.append(acquired)

    threads = [threading.Thread(target=contend) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert results.count(False) == threads_count - 1
