import pytest

from tasklane.debug import FatalError, check, fatal, warn


def test_fatal_raises_with_formatted_message():
    with pytest.raises(FatalError) as info:
        fatal("%s requires a scheduler", "wait")
    assert str(info.value) == "wait requires a scheduler"


def test_fatal_without_args_keeps_percent_signs():
    with pytest.raises(FatalError) as info:
        fatal("100% broken")
    assert str(info.value) == "100% broken"


def test_fatal_error_is_runtime_error():
    with pytest.raises(RuntimeError):
        fatal("boom")


def test_check_failure_prefixes_assert():
    with pytest.raises(FatalError) as info:
        check(False, "Failed to allocate %d pages", 3)
    assert str(info.value) == "ASSERT: Failed to allocate 3 pages"


def test_check_passing_condition_returns_nothing():
    assert check(1 + 1 == 2, "never shown") is None
    assert check([0], "non-empty list is true") is None


def test_check_uses_truthiness():
    with pytest.raises(FatalError):
        check([], "empty list is false")


def test_warn_writes_prefixed_line(capsys):
    warn("done() called %d times", 2)
    captured = capsys.readouterr()
    assert captured.out == "WARNING: done() called 2 times\n"
    assert captured.err == ""