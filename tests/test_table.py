import io
import re

import pytest

from philodine.parsing import Settings
from philodine.table import (
    Action,
    SimulationEnded,
    Table,
    elapsed_ms,
    format_message,
)

LINE = re.compile(r"^\d+\s* (\d+) (.+)$")


def make_table(n=3):
    out = io.StringIO()
    return Table(Settings(n, 1000, 1, 1), out), out


def status_lines(out):
    result = []
    for line in out.getvalue().splitlines():
        match = LINE.match(line)
        if match and match.group(2) in {a.value for a in Action}:
            result.append((int(match.group(1)), match.group(2)))
    return result


def test_format_message_pads_elapsed():
    assert format_message(0, 1, Action.EAT) == "0      1 is eating"


def test_format_message_wide_elapsed():
    assert format_message(1234567, 2, Action.DIED).endswith(" 2 died")


def test_action_texts():
    assert format_message(0, 1, Action.FORK) == "0      1 has taken a fork"
    assert format_message(5, 2, Action.SATISFIED) == "5      2 unknown"


def test_elapsed_ms_nonnegative_and_grows():
    import time

    start = time.monotonic()
    time.sleep(0.01)
    assert elapsed_ms(start) >= 5


def test_fork_assignment_alternates():
    table, _ = make_table(4)
    p0, p1 = table.philosophers[0], table.philosophers[1]
    assert p0.left_fork is table.forks[0] and p0.right_fork is table.forks[1]
    assert p1.left_fork is table.forks[2] and p1.right_fork is table.forks[1]
    last = table.philosophers[3]
    assert last.left_fork is table.forks[0] and last.right_fork is table.forks[3]


def test_write_message_and_died_silences():
    table, out = make_table()
    ph = table.philosophers[1]
    table.write_message(ph, Action.THINK)
    table.write_message(ph, Action.DIED)
    table.write_message(ph, Action.EAT)
    table.log("ignored")
    assert status_lines(out) == [(1, "is thinking"), (1, "died")]
    assert "ignored" not in out.getvalue()


def test_think_and_sleep_write_messages():
    table, out = make_table()
    ph = table.philosophers[0]
    ph.think()
    ph.sleep()
    assert status_lines(out) == [(0, "is thinking"), (0, "is sleeping")]


def test_started_count():
    table, _ = make_table()
    assert table.started_count() == 0
    assert table.mark_started() == 1
    table.mark_started()
    assert table.started_count() == 2


def test_try_eating_takes_forks_and_blocks_neighbour():
    table, out = make_table()
    first, second = table.philosophers[0], table.philosophers[1]
    assert first.try_eating() is True
    assert first.left_fork.in_use and first.right_fork.in_use
    assert second.try_eating() is False
    assert status_lines(out) == [(0, "has taken a fork"), (0, "has taken a fork")]


def test_eat_after_permission_releases_forks():
    table, out = make_table()
    ph = table.philosophers[0]
    assert ph.try_eating()
    ph.eat()
    assert ph.meals_eaten == 1
    assert not ph.left_fork.in_use and not ph.right_fork.in_use
    assert table.eating_count() == 0
    assert list(table.eat_queue) == [ph]
    assert (0, "is eating") in status_lines(out)


def test_wait_for_permission_ends():
    table, _ = make_table()
    table.ended.set()
    with pytest.raises(SimulationEnded):
        table.philosophers[2].wait_for_permission()


def test_eat_raises_when_ended():
    table, _ = make_table()
    ph = table.philosophers[1]
    table.ended.set()
    with pytest.raises(SimulationEnded):
        ph.eat()
    assert ph.meals_eaten == 0
    assert table.eat_queue.peek(0) is ph


def test_single_philosopher_shares_one_fork():
    table, _ = make_table(1)
    ph = table.philosophers[0]
    assert ph.left_fork is ph.right_fork
    assert ph.try_eating() is True
    ph.eat()
    assert not ph.left_fork.in_use
    assert ph.meals_eaten == 1