"""Tests for ScopeLocks."""

import threading

from pubsync.core.locks import ScopeLocks


def test_scopes_are_case_insensitive() -> None:
    locks = ScopeLocks()

    with locks.hold("Apps"):
        pass
    with locks.hold("APPS"):
        pass

    assert locks.scopes == ["apps"]


def test_lock_is_released_on_exception() -> None:
    locks = ScopeLocks()

    try:
        with locks.hold("Apps"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    acquired = threading.Event()

    def worker() -> None:
        with locks.hold("Apps"):
            acquired.set()

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join(timeout=5)
    assert acquired.is_set()


def test_same_scope_is_mutually_exclusive() -> None:
    locks = ScopeLocks()
    inside = threading.Event()
    release = threading.Event()
    second_entered = threading.Event()

    def holder() -> None:
        with locks.hold("Apps"):
            inside.set()
            release.wait(timeout=5)

    def contender() -> None:
        with locks.hold("apps"):
            second_entered.set()

    first = threading.Thread(target=holder)
    first.start()
    inside.wait(timeout=5)

    second = threading.Thread(target=contender)
    second.start()
    assert not second_entered.wait(timeout=0.2)

    release.set()
    first.join(timeout=5)
    second.join(timeout=5)
    assert second_entered.is_set()


def test_different_scopes_do_not_block_each_other() -> None:
    locks = ScopeLocks()

    with locks.hold("Apps"):
        with locks.hold("Desktops"):
            pass

    assert locks.scopes == ["apps", "desktops"]
