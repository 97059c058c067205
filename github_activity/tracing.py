from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from github_activity.logger import logger


@dataclass(frozen=True)
class TraceEvent:
    name: str
    fields: dict[str, Any] = field(default_factory=dict)


TraceHook = Callable[[TraceEvent], None]


class Tracer:
    """
    Sends structured events to external observability hooks.
    A failing hook is logged and never breaks the traced operation.
    """
    def __init__(self, hooks: Iterable[TraceHook] = ()):
        self._hooks = tuple(hooks)

    def emit(self, name: str, **fields: Any):
        if not self._hooks:
            return
        event = TraceEvent(name=name, fields=fields)
        for hook in self._hooks:
            try:
                hook(event)
            except Exception:
                logger.bind(trace_event=name).exception(
                    f"Trace hook {hook!r} failed"
                )
