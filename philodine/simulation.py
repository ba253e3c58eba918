"""Threads that run the dining philosophers: diners, a waiter and a death checker."""

from __future__ import annotations

import os
import sys
import threading
import time
from typing import List, Optional, Sequence, TextIO

from philodine.parsing import ParseError, Settings, parse_args
from philodine.table import (
    Action,
    Philosopher,
    SimulationEnded,
    Table,
    elapsed_ms,
)

_WAITER_PAUSE = 0.00002
_CHECKER_PAUSE = 0.000042


class Simulation:
    """One run of the simulation over a freshly laid table."""

    def __init__(self, settings: Settings, out: Optional[TextIO] = None) -> None:
        self.settings = settings
        self.table = Table(settings, out)
        self.threads: List[threading.Thread] = []

    @property
    def philosophers(self) -> List[Philosopher]:
        return self.table.philosophers

    def _philosopher_loop(self, philo: Philosopher) -> None:
        table = self.table
        table.log(f"hello from philo {philo.id}")
        with philo.meal_lock:
            philo.last_meal = time.monotonic()
        table.mark_started()
        while not table.ended.is_set():
            philo.think()
            try:
                philo.eat()
            except SimulationEnded:
                return
            if table.ended.is_set():
                return
            philo.sleep()
        table.log(f"end philo: {philo.id}")

    def _serve_round(self) -> None:
        """Hand out forks to queued philosophers until half the table is eating."""
        table = self.table
        target = self.settings.n_philo // 2
        while not table.ended.is_set() and table.eating_count() != target:
            for position, philo in enumerate(table.eat_queue):
                if philo is not None and philo.try_eating():
                    table.eat_queue.dequeue_nth(position)
                    break
            time.sleep(0)

    def _waiter_loop(self) -> None:
        table = self.table
        table.log("hello from waiter")
        half = self.settings.n_philo // 2
        while not table.ended.is_set():
            # Wait until nobody eats and enough philosophers are ready to be served.
            while True:
                if table.ended.is_set():
                    return
                queued = len(table.eat_queue)
                if table.eating_count() == 0 and queued >= half:
                    table.log(
                        f"Nobody is eating and {queued} philos are ready to be served"
                    )
                    break
                time.sleep(_WAITER_PAUSE)
            table.log("End first loop")
            self._serve_round()
            table.log("served philos")

    def _spawn(self, target, *args, name: str) -> None:
        thread = threading.Thread(target=target, args=args, name=name, daemon=True)
        thread.start()
        self.threads.append(thread)

    def start(self) -> None:
        """Start the even philosophers, the waiter, then the odd philosophers."""
        self.table.started_at = time.monotonic()
        philos = self.philosophers
        for philo in philos[0::2]:
            self._spawn(self._philosopher_loop, philo, name=f"philo-{philo.id}")
        self._spawn(self._waiter_loop, name="waiter")
        time.sleep(_WAITER_PAUSE)
        for philo in philos[1::2]:
            self._spawn(self._philosopher_loop, philo, name=f"philo-{philo.id}")

    def check_deaths(self) -> Optional[Philosopher]:
        """Watch every philosopher; announce and return the first one to starve.

        Returns None if the simulation is stopped before anyone dies.
        """
        table = self.table
        total = self.settings.n_philo
        while table.started_count() != total:
            if table.ended.is_set():
                return None
            time.sleep(0)
        table.log("hello from checker")
        limit = self.settings.time_to_die
        while not table.ended.is_set():
            for philo in self.philosophers:
                with philo.meal_lock:
                    if elapsed_ms(philo.last_meal) > limit:
                        table.write_message(philo, Action.DIED)
                        table.ended.set()
                        return philo
            time.sleep(_CHECKER_PAUSE)
        return None

    def stop(self) -> None:
        """Signal every thread to finish."""
        self.table.ended.set()

    def join(self) -> None:
        """Wait for every started thread to finish."""
        for thread in self.threads:
            thread.join()

    def run(self) -> Optional[Philosopher]:
        """Run until a philosopher dies; return that philosopher."""
        if not self.philosophers:
            self.stop()
            return None
        self.start()
        try:
            dead = self.check_deaths()
        finally:
            self.stop()
            self.join()
        return dead


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point; returns the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) not in (4, 5):
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "philo"
        print(
            f"usage: {prog} nbr_philosophers time_to_die "
            "time_to_eat time_to_sleep [times_each_philosopher_must_eat]"
        )
        return 1
    try:
        settings = parse_args(args)
        simulation = Simulation(settings)
    except (ParseError, MemoryError):
        print("Error while parsing or initialising the data.")
        return 1
    try:
        simulation.run()
    except RuntimeError:
        print("Error starting the simulation.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())