"""What to give up when the span queue is full."""

from typing import Deque, Dict, Type

from opentelemetry.sdk.trace import ReadableSpan

from ziptrace.errors import ConfigurationError


class DropPolicy:
    """Places a span in a bounded queue, evicting or refusing on overflow."""

    name = ""

    def handle(self, queue: Deque[ReadableSpan], span: ReadableSpan, max_size: int) -> int:
        """Enqueue ``span`` if policy allows; returns how many spans were lost."""
        raise NotImplementedError


class DropOldestPolicy(DropPolicy):
    """Evict the longest-waiting span; the newest data is kept."""

    name = "oldest"

    def handle(self, queue: Deque[ReadableSpan], span: ReadableSpan, max_size: int) -> int:
        evicted = 0
        while queue and len(queue) >= max_size:
            queue.popleft()
            evicted += 1
        if max_size <= 0:
            return evicted + 1
        queue.append(span)
        return evicted


class DropNewestPolicy(DropPolicy):
    """Refuse the incoming span; queued spans are kept."""

    name = "newest"

    def handle(self, queue: Deque[ReadableSpan], span: ReadableSpan, max_size: int) -> int:
        if len(queue) >= max_size:
            return 1
        queue.append(span)
        return 0


_POLICIES: Dict[str, Type[DropPolicy]] = {
    DropOldestPolicy.name: DropOldestPolicy,
    DropNewestPolicy.name: DropNewestPolicy,
}


def drop_policy_for(name: str) -> DropPolicy:
    """Instantiate the policy configured as ``oldest`` or ``newest``."""
    try:
        return _POLICIES[name]()
    except KeyError:
        raise ConfigurationError(
            "Unknown drop policy", details={"drop_policy": name, "allowed": sorted(_POLICIES)}
        ) from None


DEFAULT_DROP_POLICY = DropOldestPolicy()
