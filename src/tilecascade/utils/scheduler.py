from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable


@dataclass(slots=True)
class _Task:
	due: float
	callback: Callable[[], None]
	order: int


@dataclass(slots=True)
class TaskScheduler:
	"""Cancellable single-shot timers driven by explicit time advances.

	Tasks are keyed; arming a key that is already pending replaces it. Time
	only moves through :meth:`advance`, so callers decide whether that is a
	frame tick or a test driving the clock by hand. A callback may re-arm
	itself; the new due time is measured from the moment it fired, so one
	large ``advance`` runs every repetition that falls inside it.
	"""

	now: float = 0.0
	_tasks: Dict[Hashable, _Task] = field(init=False, default_factory=dict, repr=False)
	_sequence: int = field(init=False, default=0, repr=False)

	def arm(self, key: Hashable, delay: float, callback: Callable[[], None]) -> None:
		self._sequence += 1
		self._tasks[key] = _Task(due=self.now + max(0.0, float(delay)), callback=callback, order=self._sequence)

	def cancel(self, key: Hashable) -> bool:
		return self._tasks.pop(key, None) is not None

	def cancel_all(self) -> None:
		self._tasks.clear()

	def is_armed(self, key: Hashable) -> bool:
		return key in self._tasks

	def remaining(self, key: Hashable) -> float | None:
		task = self._tasks.get(key)
		if task is None:
			return None
		return max(0.0, task.due - self.now)

	def advance(self, dt: float) -> int:
		"""Move the clock forward by ``dt`` seconds and fire due tasks in order."""

		if dt < 0.0:
			raise ValueError("cannot advance the scheduler backwards")
		target = self.now + dt
		fired = 0
		while True:
			due_key = None
			due_task: _Task | None = None
			for key, task in self._tasks.items():
				if task.due > target:
					continue
				if due_task is None or (task.due, task.order) < (due_task.due, due_task.order):
					due_key, due_task = key, task
			if due_task is None:
				break
			del self._tasks[due_key]
			self.now = max(self.now, due_task.due)
			due_task.callback()
			fired += 1
		self.now = target
		return fired
