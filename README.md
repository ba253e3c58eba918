# philodine

A simulation of the dining philosophers problem, built on threads.

Philosophers sit at a round table with one fork between each pair of
neighbours. Each one thinks, queues up to eat, eats and sleeps, over and
over. A waiter thread watches the queue. When nobody is eating and at
least half of the table is queued, the waiter serves philosophers in queue
order. A philosopher is served only when both forks next to them are free.
The waiter keeps serving until half of the table is eating. A checker
watches how long each philosopher has gone without a meal. When one has
waited longer than `time_to_die`, it prints that philosopher's death and
the run ends.

Each event is printed with the milliseconds since the start, the
philosopher's id and what happened:

```
0      0 is thinking
0      0 has taken a fork
0      0 has taken a fork
0      0 is eating
200    0 is sleeping
```

After a `died` line, no further event lines are printed. Diagnostic lines
from the threads are mixed in with the events. Examples are
`hello from philo 0`, `enqueued, queue size 3`, `allow eating: 2` and
`served philos`.

## Installation

```
pip install .
```

## Usage

```
philo nbr_philosophers time_to_die time_to_eat time_to_sleep [times_each_philosopher_must_eat]
```

You can also run it as `python -m philodine.simulation` with the same
arguments.

All times are in milliseconds. Each argument must be a non-negative whole
number below 2147483647. Leading whitespace and a single `+` sign are
accepted. A `-` sign, trailing characters or an empty value are rejected.

- If the wrong number of arguments is given, a usage line is printed and
  the exit status is 1.
- If an argument is rejected, `Error while parsing or initialising the
  data.` is printed and the exit status is 1.
- Otherwise the simulation runs until a philosopher dies, and the exit
  status is 0.

Example:

```
philo 4 410 200 200
```

## Library use

```python
import sys

from philodine.parsing import parse_args
from philodine.simulation import Simulation

settings = parse_args(["5", "800", "200", "200"])
simulation = Simulation(settings, sys.stdout)
dead = simulation.run()   # returns the Philosopher who died, or None
```

### `philodine.parsing`

- `parse_count(text)` parses one argument.
- `parse_args(args)` takes four or five strings and returns a frozen
  `Settings`. Its fields are `n_philo`, `time_to_die`, `time_to_eat`,
  `time_to_sleep` and `n_meals`. `n_meals` is -1 when the fifth argument
  is not given.
- Both raise `ParseError`, a subclass of `ValueError`, on bad input.

### `philodine.simulation`

A `Simulation` has the following methods:

- `start()` starts the philosopher threads and the waiter.
- `check_deaths()` blocks until a philosopher starves. It then prints the
  death, ends the run and returns that `Philosopher`. It returns `None` if
  `stop()` is called first.
- `stop()` signals every thread to finish.
- `join()` waits for the threads.
- `run()` does all of the above and returns the philosopher who died.

With zero philosophers, `run()` returns `None` at once.

### `philodine.table`

- `Table` holds the forks, the philosophers, the eat queue and the output
  lock.
- `Philosopher` holds the actions: `think`, `sleep`, `try_eating`,
  `wait_for_permission` and `eat`.
- `format_message(elapsed, philo_id, action)` renders one event line.
- `Action` lists the events.

### `philodine.servicequeue`

`ServiceQueue` is the thread-safe FIFO the waiter uses. You can use it on
its own. It supports `enqueue`, `dequeue`, `dequeue_nth`, `peek`,
`for_each`, `clear`, `len()` and iteration over a snapshot.

## Limitations

The optional `times_each_philosopher_must_eat` argument is parsed and kept
in `Settings.n_meals`. The simulation does not use it: a run does not stop
once every philosopher has eaten that many meals. A run ends only when a
philosopher dies or `stop()` is called.

## Running the tests

```
pip install .[test]
pytest
```