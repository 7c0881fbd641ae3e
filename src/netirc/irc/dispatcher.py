"""Event handler registry and dispatch."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..constants import PING_EVENT, PONG_COMMAND
from ..logs.logger import IRCLogger

Handler = Callable[..., object]


class EventDispatcher:
    """Routes resolved events to application handlers.

    Handlers are keyed by event name (any string: textual commands, numerics,
    resolved names such as ``MOTD`` and the ``CONNECT``/``DISCONNECT``
    notifications) and called with the event's positional arguments. Events
    with arguments but no handler go to ``fallback``. ``PING`` is answered
    through ``reply`` and never reaches a handler.
    """

    def __init__(
        self,
        fallback: Handler,
        reply: Callable[[str], object] | None = None,
        logger: IRCLogger | None = None,
    ) -> None:
        self.fallback = fallback
        self.reply = reply
        self.logger = logger or IRCLogger()
        self._handlers: dict[str, Handler] = {}

    def register(self, event: str, handler: Handler) -> None:
        self._handlers[event] = handler

    def unregister(self, event: str) -> None:
        self._handlers.pop(event, None)

    def has_handler(self, event: str) -> bool:
        return event in self._handlers

    def on(self, event: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: Handler) -> Handler:
            self.register(event, handler)
            return handler

        return decorator

    def dispatch(self, event: str, args: Sequence[str | None] = ()) -> None:
        if event == PING_EVENT:
            self._answer_ping(args)
            return

        handler = self._handlers.get(event)
        if handler is not None:
            self.logger.log_event("dispatch", "callback", level=5, event=event)
        elif args:
            self.logger.log_event("dispatch", "fallback", level=4, event=event)
            handler = self.fallback
        else:
            return

        try:
            handler(*args)
        except Exception as e:  # noqa: BLE001
            self.logger.log_event(
                "dispatch",
                "handler_error",
                level=1,
                event=event,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _answer_ping(self, args: Sequence[str | None]) -> None:
        # PING :token carries it in params; "PING token" after a prefix in target
        padded = tuple(args) + (None,) * (4 - len(args))
        token = padded[3] or padded[2]
        self.logger.log_event("dispatch", "ping", level=5, token=token or "")
        if self.reply is None:
            return
        self.reply(f"{PONG_COMMAND} :{token}" if token else PONG_COMMAND)
