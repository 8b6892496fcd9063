import threading

from tasklane.thread_local import ThreadLocal


def _read_in_thread(local):
    seen = []
    thread = threading.Thread(target=lambda: seen.append(local.value))
    thread.start()
    thread.join(5)
    return seen[0]


def test_initial_value():
    marker = object()
    local = ThreadLocal(marker)
    assert local.value is marker


def test_default_initial_is_none():
    local = ThreadLocal()
    assert local.value is None


def test_set_is_per_thread():
    local = ThreadLocal("start")
    local.value = "main"
    assert local.value == "main"
    assert _read_in_thread(local) == "start"


def test_thread_write_does_not_leak():
    local = ThreadLocal("start")

    def body():
        local.value = "worker"
        seen.append(local.value)

    seen = []
    thread = threading.Thread(target=body)
    thread.start()
    thread.join(5)
    assert seen == ["worker"]
    assert local.value == "start"


def test_delete_restores_initial():
    local = ThreadLocal("start")
    local.value = "changed"
    del local.value
    assert local.value == "start"


def test_separate_instances_are_independent():
    first = ThreadLocal("a")
    second = ThreadLocal("b")
    first.value = "changed"
    assert second.value == "b"
    assert first.value == "changed"