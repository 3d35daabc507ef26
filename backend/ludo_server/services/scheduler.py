import threading
from collections import deque


class TaskScheduler:
    """Runs deferred steps after a delay on Socket.IO background tasks.

    Tasks only carry plain identifiers; whatever they act on must be looked
    up again when they fire. In eager mode (tests, CLI) delays are skipped
    and tasks run inline, queued so a long chain of steps never recurses.
    """

    def __init__(self, socketio, app, eager: bool = False):
        self.socketio = socketio
        self.app = app
        self.eager = eager
        self._local = threading.local()

    def schedule(self, delay: float, fn, *args) -> None:
        if self.eager:
            self._enqueue(fn, args)
            return
        self.socketio.start_background_task(self._run_later, delay, fn, args)

    def _enqueue(self, fn, args) -> None:
        queue = getattr(self._local, 'queue', None)
        if queue is None:
            queue = self._local.queue = deque()
        queue.append((fn, args))
        if getattr(self._local, 'draining', False):
            return
        self._local.draining = True
        try:
            while queue:
                task, task_args = queue.popleft()
                self._run(task, task_args)
        finally:
            self._local.draining = False

    def _run_later(self, delay, fn, args) -> None:
        if delay and delay > 0:
            self.socketio.sleep(delay)
        with self.app.app_context():
            self._run(fn, args)

    def _run(self, fn, args) -> None:
        try:
            fn(*args)
        except Exception:
            self.app.logger.exception(f"[task-error] task={getattr(fn, '__name__', fn)} args={args}")
