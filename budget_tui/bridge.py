"""Background reader that forwards terminal input to the control loop."""
from __future__ import annotations

import queue
import threading
from typing import Callable

from .errors import ChannelClosed
from .events import CTRL_C, QuitSignal
from .logging_setup import get_logger
from .ui import decode_key

log = get_logger(__name__)

_CLOSED = object()


class Channel:
    """Unbounded FIFO between one producer thread and the control loop.

    Closing is visible to both sides: :meth:`send` raises
    :class:`ChannelClosed` immediately, :meth:`recv` raises it once the
    messages queued before the close have been consumed.
    """

    def __init__(self):
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, message) -> None:
        if self._closed.is_set():
            raise ChannelClosed("receiver is gone")
        self._queue.put(message)

    def recv(self, timeout: float | None = None):
        """Block for the next message (``queue.Empty`` after ``timeout``)."""
        message = self._queue.get(timeout=timeout)
        if message is _CLOSED:
            # leave the marker for any later receive
            self._queue.put(_CLOSED)
            raise ChannelClosed("sender is gone")
        return message

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_CLOSED)


class InputBridge:
    """Pump ``read()`` results through ``decode`` onto ``channel``.

    Ctrl-C is forwarded and immediately followed by a :class:`QuitSignal`.
    The bridge stops quietly when the channel is closed, and closes the
    channel itself when ``read`` raises ``EOFError``.
    """

    def __init__(self, read: Callable[[], object], channel: Channel, decode=decode_key):
        self._read = read
        self._decode = decode
        self.channel = channel
        self.thread: threading.Thread | None = None

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, name="input-bridge", daemon=True)
        self.thread.start()
        return self.thread

    def run(self) -> None:
        while True:
            try:
                raw = self._read()
            except EOFError:
                log.info("input exhausted, closing channel")
                self.channel.close()
                return
            event = self._decode(raw)
            try:
                self.channel.send(event)
                if event == CTRL_C:
                    self.channel.send(QuitSignal())
            except ChannelClosed:
                log.debug("channel closed, input bridge stopping")
                return
