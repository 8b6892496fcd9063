import pytest

from tasklane.bench import (
    WORK_INPUT,
    bench_thread_counts,
    do_some_work,
    main,
    multi_queue_executor,
    single_queue_executor,
)


@pytest.mark.parametrize("x", [1, 123, 0x1020, 0xFFFFFFFF, 0xDEADBEEF])
def test_do_some_work_keeps_only_input_bits(x):
    result = do_some_work(x)
    assert result & ~x == 0
    assert 0 <= result <= x


def test_do_some_work_pinned_value():
    first = do_some_work(123)
    second = do_some_work(123)
    assert first == 122
    assert second == 122


def test_do_some_work_truncates_to_32_bits():
    assert do_some_work(0x1_0000_007B) == do_some_work(0x7B)


def test_thread_counts_powers_of_two():
    assert bench_thread_counts(8, False) == [0, 1, 2, 4, 8]


def test_thread_counts_appends_non_power_of_two():
    counts = bench_thread_counts(6, False)
    assert counts[-1] == 6
    assert counts[:-1] == [c for c in counts[:-1] if c == 0 or c & (c - 1) == 0]
    assert sorted(counts) == counts


@pytest.mark.parametrize("cpus", [1, 3, 5, 16])
def test_thread_counts_full_covers_every_count(cpus):
    assert bench_thread_counts(cpus, True) == list(range(cpus + 1))


def test_thread_counts_zero_cpus():
    assert bench_thread_counts(0, False) == [0]


def test_thread_counts_negative_rejected():
    with pytest.raises(ValueError):
        bench_thread_counts(-1, False)


@pytest.mark.parametrize("executor", [single_queue_executor, multi_queue_executor])
@pytest.mark.parametrize("threads", [0, 1, 3])
def test_executors_run_every_task(executor, threads):
    results = executor(4, threads)
    assert len(results) == 4
    assert set(results) == {do_some_work(WORK_INPUT)}


@pytest.mark.parametrize("executor", [single_queue_executor, multi_queue_executor])
def test_executors_with_no_tasks(executor):
    assert executor(0, 2) == []


@pytest.mark.parametrize("executor", [single_queue_executor, multi_queue_executor])
@pytest.mark.parametrize("tasks,threads", [(-1, 1), (1, -1)])
def test_executors_reject_negative(executor, tasks, threads):
    with pytest.raises(ValueError):
        executor(tasks, threads)


def test_main_reports_each_executor_and_thread_count(capsys):
    assert main(["--tasks", "2", "--cpus", "1"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert lines[0].startswith("SingleQueueTaskExecutor/tasks:2/threads:0")
    assert lines[-1].startswith("MultiQueueTaskExecutor/tasks:2/threads:1")
    assert all(line.endswith(" ms") for line in lines)


def test_main_filter_selects_executor(capsys):
    assert main(["--tasks", "1", "--cpus", "1", "--filter", "MultiQueue"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert all(line.startswith("MultiQueueTaskExecutor") for line in lines)


def test_main_rejects_bad_repetitions():
    with pytest.raises(SystemExit) as info:
        main(["--repetitions", "0"])
    assert info.value.code == 2