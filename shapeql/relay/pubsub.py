# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""In-process publish/subscribe over asyncio queues."""

import asyncio
from collections import defaultdict
from typing import Any, AsyncIterator


class PubSub:
    """Fan-out of published payloads to every current subscriber of a channel.

    Subscribers only see payloads published after they subscribed. Nothing
    is buffered for channels without subscribers.
    """

    def __init__(self):
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    def publish(self, channel: str, payload: Any) -> int:
        """Deliver a payload; returns the number of subscribers reached."""
        queues = list(self._subscribers.get(channel, ()))
        for queue in queues:
            queue.put_nowait(payload)
        return len(queues)

    def open(self, channel: str) -> asyncio.Queue:
        """Register a subscriber queue. Pair with close()."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers[channel].add(queue)
        return queue

    def close(self, channel: str, queue: asyncio.Queue) -> None:
        self._subscribers[channel].discard(queue)
        if not self._subscribers[channel]:
            del self._subscribers[channel]

    async def subscribe(self, channel: str) -> AsyncIterator[Any]:
        """Yield payloads published to ``channel`` until the consumer stops."""
        queue = self.open(channel)
        try:
            while True:
                yield await queue.get()
        finally:
            self.close(channel, queue)
