import pytest

from tasklane.finally_ import Finally, SharedFinally, make_finally, make_shared_finally


def _counter():
    calls = []
    return calls, lambda: calls.append(1)


def test_run_calls_once():
    calls, func = _counter()
    fin = make_finally(func)
    with fin as entered:
        assert entered is fin
        entered.run()
        entered.run()
        assert calls == [1]
    assert calls == [1]


def test_with_block_runs_on_exit():
    calls, func = _counter()
    fin = make_finally(func)
    with fin as entered:
        assert entered is fin
        assert calls == []
    assert calls == [1]


def test_with_block_runs_on_exception():
    calls, func = _counter()
    fin = make_finally(func)
    with pytest.raises(ValueError):
        with fin as entered:
            assert entered is fin
            raise ValueError("early exit")
    assert calls == [1]


def test_enter_returns_same_object():
    calls, func = _counter()
    fin = make_finally(func)
    with fin as entered:
        assert entered is fin
        entered.run()
        assert calls == [1]
    assert calls == [1]


def test_dropping_runs_function():
    calls, func = _counter()
    fin = Finally(func)
    entered = fin.__enter__()
    assert entered is fin
    assert calls == []
    del entered
    del fin
    assert calls == [1]


def test_transfer_moves_ownership():
    calls, func = _counter()
    original = make_finally(func)
    moved = original.transfer()
    assert isinstance(moved, Finally)
    assert moved is not original
    original.run()
    assert calls == []
    moved.run()
    assert calls == [1]


def test_transfer_after_run_is_inert():
    calls, func = _counter()
    fin = make_finally(func)
    fin.run()
    moved = fin.transfer()
    with moved as entered:
        assert entered is moved
        entered.run()
    assert calls == [1]


def test_shared_runs_after_last_reference():
    calls, func = _counter()
    holders = [make_shared_finally(func)]
    holders.append(holders[0])
    assert isinstance(holders[0], SharedFinally)
    assert holders[0] is holders[1]
    del holders[0]
    assert calls == []
    del holders[0]
    assert calls == [1]


def test_shared_class_direct():
    calls, func = _counter()
    holders = [SharedFinally(func)]
    holders.append(holders[0])
    assert holders[0] is holders[1]
    assert calls == []
    holders.clear()
    assert calls == [1]