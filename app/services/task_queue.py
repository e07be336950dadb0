"""
In-process deferred task queue.

Request handlers enqueue a named unit of work with a payload and get a
handle back immediately; a worker thread consumes the queue and calls the
registered handler. There is no retry and no cancellation: once queued a
task runs to completion or fails and is logged.
"""

import queue
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from app.core.logging import get_logger

logger = get_logger(__name__)

TaskHandler = Callable[..., None]

QUEUED = "queued"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class TaskHandle:
    id: uuid.UUID
    name: str
    payload: Dict[str, Any]
    status: str = QUEUED
    error: Optional[str] = None
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None


class TaskQueue:
    def __init__(self):
        self._queue: "queue.Queue[Optional[TaskHandle]]" = queue.Queue()
        self._handlers: Dict[str, TaskHandler] = {}
        self._worker: Optional[threading.Thread] = None
        self._timers: Dict[uuid.UUID, threading.Timer] = {}

    def register(self, name: str, handler: TaskHandler) -> None:
        self._handlers[name] = handler

    def enqueue(self, name: str, payload: Dict[str, Any], delay_seconds: float = 0) -> TaskHandle:
        """Schedule ``name`` with ``payload``; never waits for it to run."""
        if name not in self._handlers:
            raise ValueError(f"No handler registered for task '{name}'")

        handle = TaskHandle(id=uuid.uuid4(), name=name, payload=dict(payload))
        if delay_seconds > 0:
            timer = threading.Timer(delay_seconds, self._fire_delayed, args=(handle,))
            timer.daemon = True
            self._timers[handle.id] = timer
            timer.start()
        else:
            self._queue.put(handle)

        logger.debug("Task enqueued", task=name, task_id=str(handle.id), delay_seconds=delay_seconds)
        return handle

    def _fire_delayed(self, handle: TaskHandle) -> None:
        self._timers.pop(handle.id, None)
        self._queue.put(handle)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def _execute(self, handle: TaskHandle) -> None:
        handle.status = RUNNING
        try:
            self._handlers[handle.name](**handle.payload)
            handle.status = COMPLETED
        except Exception as e:
            handle.status = FAILED
            handle.error = str(e)
            logger.exception("Task failed", task=handle.name, task_id=str(handle.id))
        finally:
            handle.finished_at = datetime.now(timezone.utc)

    def run_pending(self) -> int:
        """Run every queued task in the calling thread. Returns how many ran."""
        ran = 0
        while True:
            try:
                handle = self._queue.get_nowait()
            except queue.Empty:
                return ran
            if handle is None:
                continue
            self._execute(handle)
            ran += 1

    def _work(self) -> None:
        while True:
            handle = self._queue.get()
            if handle is None:
                return
            self._execute(handle)

    def start(self) -> None:
        if self._worker and self._worker.is_alive():
            return
        self._worker = threading.Thread(target=self._work, name="task-queue-worker", daemon=True)
        self._worker.start()
        logger.info("Task worker started")

    def stop(self, timeout: float = 5.0) -> None:
        for timer in list(self._timers.values()):
            timer.cancel()
        self._timers.clear()
        if self._worker and self._worker.is_alive():
            self._queue.put(None)
            self._worker.join(timeout)
            logger.info("Task worker stopped")
        self._worker = None
