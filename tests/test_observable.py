from __future__ import annotations

import logging

import pytest

from blockbot.api.models import Actor
from blockbot.core.observable import ObservableValue


def test_subscribe_receives_current_value_then_changes() -> None:
    store = ObservableValue(1)
    seen: list[int] = []

    unsubscribe = store.subscribe(seen.append)
    store.set(2)
    unsubscribe()
    store.set(3)

    assert seen == [1, 2]
    assert store.value == 3


def test_update_replaces_the_model() -> None:
    store = ObservableValue(Actor())
    before = store.value

    after = store.update(x=50)

    assert after is store.value
    assert after is not before
    assert before.x == 0
    assert after.x == 50


def test_update_requires_a_model() -> None:
    with pytest.raises(TypeError):
        ObservableValue(1).update(x=1)


def test_failing_subscriber_is_logged_and_others_still_run(caplog: pytest.LogCaptureFixture) -> None:
    store = ObservableValue(0)
    seen: list[int] = []

    def _boom(value: int) -> None:
        if value:
            raise RuntimeError("observer broke")

    store.subscribe(_boom)
    store.subscribe(seen.append)

    with caplog.at_level(logging.ERROR):
        store.set(5)

    assert seen == [0, 5]
    assert "failed" in caplog.text
