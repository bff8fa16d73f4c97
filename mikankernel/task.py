"""Tasks with message queues and a priority-level round-robin scheduler."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, List, Optional, Union


class NoSuchTaskError(LookupError):
    """No task has the requested id."""


class Task:
    """A schedulable task with its own message queue."""

    DEFAULT_LEVEL = 1

    def __init__(self, task_id: int, manager: TaskManager) -> None:
        self.id = task_id
        self._manager = manager
        self.level = self.DEFAULT_LEVEL
        self.running = False
        self._msgs: Deque[Any] = deque()

    def sleep(self) -> Task:
        """Take this task off the run queue."""
        self._manager.sleep(self)
        return self

    def wakeup(self) -> Task:
        """Put this task on the run queue at its current level."""
        self._manager.wakeup(self)
        return self

    def send_message(self, msg: Any) -> None:
        """Queue a message and wake the task."""
        self._msgs.append(msg)
        self.wakeup()

    def receive_message(self) -> Optional[Any]:
        """Pop the oldest message, or None when the queue is empty."""
        if not self._msgs:
            return None
        return self._msgs.popleft()


TaskRef = Union[Task, int]


class TaskManager:
    """Keeps run queues per level; the highest non-empty level runs."""

    MAX_LEVEL = 3

    def __init__(self) -> None:
        self._tasks: List[Task] = []
        self._latest_id = 0
        self._running: List[Deque[Task]] = [deque() for _ in range(self.MAX_LEVEL + 1)]
        self._current_level = self.MAX_LEVEL
        self._level_changed = False

        main = self.new_task()
        main.level = self._current_level
        main.running = True
        self._running[self._current_level].append(main)

        idle = self.new_task()
        idle.level = 0
        idle.running = True
        self._running[0].append(idle)

    @property
    def current_level(self) -> int:
        """Level whose queue is currently being run."""
        return self._current_level

    def new_task(self) -> Task:
        """Create a sleeping task with the next id."""
        self._latest_id += 1
        task = Task(self._latest_id, self)
        self._tasks.append(task)
        return task

    def _resolve(self, task: TaskRef) -> Task:
        if isinstance(task, Task):
            return task
        for candidate in self._tasks:
            if candidate.id == task:
                return candidate
        raise NoSuchTaskError(f"no task with id {task}")

    def _erase(self, task: Task) -> None:
        queue = self._running[task.level]
        remaining = [t for t in queue if t is not task]
        queue.clear()
        queue.extend(remaining)

    def _is_current(self, task: Task) -> bool:
        queue = self._running[self._current_level]
        return bool(queue) and queue[0] is task

    def switch_task(self, current_sleep: bool = False) -> Task:
        """Rotate the current queue and return the task that runs next."""
        level_queue = self._running[self._current_level]
        current = level_queue.popleft()
        if not current_sleep:
            level_queue.append(current)
        if not level_queue:
            self._level_changed = True

        if self._level_changed:
            self._level_changed = False
            for lv in range(self.MAX_LEVEL, -1, -1):
                if self._running[lv]:
                    self._current_level = lv
                    break

        return self._running[self._current_level][0]

    def sleep(self, task: TaskRef) -> None:
        """Stop running a task (given as a Task or an id)."""
        task = self._resolve(task)
        if not task.running:
            return
        task.running = False
        if self._is_current(task):
            self.switch_task(True)
            return
        self._erase(task)

    def wakeup(self, task: TaskRef, level: Optional[int] = None) -> None:
        """Make a task runnable, optionally at a new level."""
        task = self._resolve(task)
        if level is not None:
            if level < 0:
                level = None
            elif level > self.MAX_LEVEL:
                raise ValueError(f"level must be at most {self.MAX_LEVEL}, got {level}")

        if task.running:
            self._change_level_running(task, level)
            return

        if level is None:
            level = task.level
        task.level = level
        task.running = True
        self._running[level].append(task)
        if level > self._current_level:
            self._level_changed = True

    def send_message(self, task_id: int, msg: Any) -> None:
        """Deliver a message to the task with task_id."""
        self._resolve(task_id).send_message(msg)

    def current_task(self) -> Task:
        """The task at the head of the current level's queue."""
        return self._running[self._current_level][0]

    def _change_level_running(self, task: Task, level: Optional[int]) -> None:
        if level is None or level == task.level:
            return

        if not self._is_current(task):
            self._erase(task)
            self._running[level].append(task)
            task.level = level
            if level > self._current_level:
                self._level_changed = True
            return

        self._running[self._current_level].popleft()
        self._running[level].appendleft(task)
        task.level = level
        if level < self._current_level:
            self._level_changed = True
        self._current_level = level