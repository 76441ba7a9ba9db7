import pytest

from schedkit.pmu import PmuTracker

EVENT = 0x11


def tracked(task="task"):
    tracker = PmuTracker()
    tracker.install(EVENT)
    tracker.task_init(task)
    return tracker


def test_single_interval_delta():
    tracker = tracked()
    tracker.event_start("task", 100, False)
    tracker.event_stop("task", 150)
    assert tracker.read("task", EVENT) == 150 - 100


def test_intervals_accumulate():
    tracker = tracked()
    tracker.event_start("task", 0, False)
    tracker.event_stop("task", 10)
    tracker.event_start("task", 20, False)
    tracker.event_stop("task", 25)
    assert tracker.read("task", EVENT) == (10 - 0) + (25 - 20)


def test_start_with_update_adds_delta():
    tracker = tracked()
    tracker.event_start("task", 40, False)
    tracker.event_start("task", 90, True)
    assert tracker.read("task", EVENT) == 90 - 40
    assert tracker.tasks["task"].start[0] == 90


def test_first_stop_after_init_is_invalid():
    tracker = tracked()
    tracker.event_stop("task", 500)
    assert tracker.read("task", EVENT) == 0


def test_read_with_clear():
    tracker = tracked()
    tracker.event_start("task", 1, False)
    tracker.event_stop("task", 8)
    assert tracker.read("task", EVENT, clear=True) == 8 - 1
    assert tracker.read("task", EVENT) == 0


def test_reinstall_invalidates_measurements():
    tracker = tracked()
    tracker.event_start("task", 0, False)
    tracker.install(0x22) if tracker.max_counters > 1 else tracker.uninstall(EVENT)
    tracker.install(EVENT)
    tracker.event_stop("task", 1000)
    assert tracker.read("task", EVENT) == 0


def test_switched_flag_on_multiplexing():
    tracker = tracked()
    tracker.event_start("task", 0, False)
    tracker.event_stop("task", 5, enabled=10, running=7)
    assert tracker.tasks["task"].switched is True


def test_switched_flag_stays_clear_when_running_full_time():
    tracker = tracked()
    tracker.event_start("task", 0, False)
    tracker.event_stop("task", 5, enabled=10, running=10)
    assert tracker.tasks["task"].switched is False


def test_install_full_raises():
    tracker = PmuTracker(max_counters=1)
    tracker.install(EVENT)
    with pytest.raises(OverflowError):
        tracker.install(0x22)


def test_install_zero_rejected():
    with pytest.raises(ValueError):
        PmuTracker().install(0)


def test_uninstall_unknown_raises():
    with pytest.raises(KeyError):
        PmuTracker().uninstall(EVENT)


def test_uninstall_frees_slot():
    tracker = PmuTracker(max_counters=1)
    tracker.install(EVENT)
    tracker.uninstall(EVENT)
    tracker.install(0x22)
    assert tracker.event_idx == [0x22]


def test_read_unknown_event_raises():
    tracker = tracked()
    with pytest.raises(ValueError):
        tracker.read("task", 0x99)


def test_read_unknown_task_raises():
    tracker = tracked()
    with pytest.raises(KeyError):
        tracker.read("other", EVENT)


def test_task_fini_forgets_task():
    tracker = tracked()
    tracker.task_fini("task")
    with pytest.raises(KeyError):
        tracker.read("task", EVENT)


def test_tasks_are_independent():
    tracker = tracked("a")
    tracker.task_init("b")
    tracker.event_start("a", 0, False)
    tracker.event_start("b", 0, False)
    tracker.event_stop("a", 30)
    tracker.event_stop("b", 70)
    assert tracker.read("a", EVENT) == 30
    assert tracker.read("b", EVENT) == 70


def test_uninstalled_counter_not_accumulated():
    tracker = PmuTracker(max_counters=2)
    tracker.install(EVENT)
    tracker.task_init("task")
    tracker.event_start("task", 0, False)
    tracker.event_stop("task", 12)
    assert tracker.tasks["task"].agg[1] == 0
    assert tracker.read("task", EVENT) == 12