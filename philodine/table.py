"""Shared table state, forks and philosopher actions."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TextIO

from philodine.parsing import Settings
from philodine.servicequeue import ServiceQueue


class Action(Enum):
    """Things a philosopher can do, valued by the text printed for them."""

    FORK = "has taken a fork"
    EAT = "is eating"
    SLEEP = "is sleeping"
    THINK = "is thinking"
    DIED = "died"
    SATISFIED = "unknown"


class SimulationEnded(Exception):
    """Raised in a philosopher when the simulation has come to an end."""


def elapsed_ms(since: float) -> int:
    """Whole milliseconds on the monotonic clock since the given time."""
    now = time.monotonic()
    return int(now * 1000) - int(since * 1000)


def format_message(elapsed: int, philo_id: int, action: Action) -> str:
    """Render one status line, without the trailing newline."""
    return f"{elapsed:<6d} {philo_id} {action.value}"


@dataclass
class Fork:
    """A fork shared by two neighbours."""

    in_use: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


class Table:
    """Everything the philosophers share: forks, the queue and the output."""

    def __init__(self, settings: Settings, out: Optional[TextIO] = None) -> None:
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self.started_at = time.monotonic()
        self.ended = threading.Event()
        self.eat_queue = ServiceQueue()
        self.data_lock = threading.Lock()
        self.n_eating = 0
        self._n_started = 0
        self._write_lock = threading.Lock()
        self._silenced = False
        count = settings.n_philo
        self.forks = [Fork() for _ in range(count)]
        self.philosophers = []
        for i in range(count):
            near, far = self.forks[i], self.forks[(i + 1) % count]
            left, right = (near, far) if i % 2 == 0 else (far, near)
            self.philosophers.append(Philosopher(i, left, right, self))

    def _emit(self, line: str) -> None:
        with self._write_lock:
            if not self._silenced:
                print(line, file=self.out, flush=True)

    def write_message(self, philo: "Philosopher", action: Action) -> None:
        """Print a timestamped status line; after a death nothing more is printed."""
        with self._write_lock:
            if self._silenced:
                return
            line = format_message(elapsed_ms(self.started_at), philo.id, action)
            print(line, file=self.out, flush=True)
            if action is Action.DIED:
                self._silenced = True

    def log(self, text: str) -> None:
        """Print a diagnostic line under the output lock."""
        self._emit(text)

    def eating_count(self) -> int:
        """Number of philosophers currently eating."""
        with self.data_lock:
            return self.n_eating

    def started_count(self) -> int:
        """Number of philosopher threads that have started."""
        with self.data_lock:
            return self._n_started

    def mark_started(self) -> int:
        """Record that one more philosopher has started; return the new count."""
        with self.data_lock:
            self._n_started += 1
            return self._n_started


class Philosopher:
    """One diner: thinks, waits to be served, eats and sleeps."""

    def __init__(self, philo_id: int, left_fork: Fork, right_fork: Fork, table: Table) -> None:
        self.id = philo_id
        self.left_fork = left_fork
        self.right_fork = right_fork
        self.table = table
        self.meals_eaten = 0
        self.last_meal = time.monotonic()
        self.meal_lock = threading.Lock()
        self._allow_eating = False
        self._allow_lock = threading.Lock()

    def think(self) -> None:
        self.table.write_message(self, Action.THINK)

    def sleep(self) -> None:
        self.table.write_message(self, Action.SLEEP)
        time.sleep(self.table.settings.time_to_sleep / 1000)

    def try_eating(self) -> bool:
        """Take both forks if both are free and grant permission to eat."""
        left, right = self.left_fork, self.right_fork
        left.lock.acquire()
        right.lock.acquire()
        if left.in_use or right.in_use:
            left.lock.release()
            right.lock.release()
            return False
        left.in_use = True
        left.lock.release()
        self.table.write_message(self, Action.FORK)
        right.in_use = True
        right.lock.release()
        self.table.write_message(self, Action.FORK)
        self.table.log(f"allow eating: {self.id}")
        with self._allow_lock:
            self._allow_eating = True
        return True

    def wait_for_permission(self) -> None:
        """Block until allowed to eat; raise SimulationEnded if the run stops first."""
        while True:
            with self._allow_lock:
                if self.table.ended.is_set():
                    raise SimulationEnded
                if self._allow_eating:
                    self._allow_eating = False
                    return
            time.sleep(0.00001)

    def eat(self) -> None:
        """Queue up, wait to be served, eat, then put the forks back."""
        table = self.table
        table.eat_queue.enqueue(self)
        table.log(f"enqueued, queue size {len(table.eat_queue)}")
        try:
            self.wait_for_permission()
        except SimulationEnded:
            table.log(f"returning {self.id} because end")
            raise
        table.log(f"allowed eating {self.id}")
        with self.meal_lock:
            with table.data_lock:
                table.n_eating += 1
            self.last_meal = time.monotonic()
        table.write_message(self, Action.EAT)
        time.sleep(table.settings.time_to_eat / 1000)
        self.meals_eaten += 1
        with table.data_lock:
            with self.left_fork.lock, self.right_fork.lock:
                self.left_fork.in_use = False
                self.right_fork.in_use = False
            table.n_eating -= 1