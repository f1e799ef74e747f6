from __future__ import annotations

import asyncio
from typing import Any, Dict

from msgcontract.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)
class Channel:
    def __init__(self, maxsize: int = 100):
        self.q: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.maxsize = int(maxsize)
        self.dropped = 0

    @property
    def depth(self) -> int:
        return self.q.qsize()

    def publish_nowait(self, item: Any) -> bool:
        # never waits; if full we drop
        try:
            self.q.put_nowait(item)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False


class ChannelTransport:
    """Transport sink that enqueues ``{"type": name, "payload": value}`` frames.

    Never blocks the sender: a full channel drops the frame and counts it.
    """

    def __init__(self, channel: Channel):
        self.channel = channel

    def accept(self, message_name: str, value: Any) -> None:
        ok = self.channel.publish_nowait({"type": message_name, "payload": value})
        if not ok:
            logger.warning("channel full (maxsize=%s), dropped %s", self.channel.maxsize, message_name)


class EventBus:
    """Per-connection channels, one per direction, with basic metrics.

    Queues are bounded to support backpressure.
    """

    DEFAULT_CHANNELS = [
        "to_host",
        "to_peer",
    ]

    def __init__(self, default_maxsize: int = 100):
        self.sessions: Dict[str, Dict[str, Channel]] = {}
        self.default_maxsize = int(default_maxsize)

    def _ensure_session(self, session_id: str):
        if session_id not in self.sessions:
            self.sessions[session_id] = {name: Channel(maxsize=self.default_maxsize) for name in self.DEFAULT_CHANNELS}

    def channel(self, session_id: str, channel_name: str) -> Channel:
        self._ensure_session(session_id)
        ch = self.sessions[session_id].get(channel_name)
        if ch is None:
            ch = Channel(maxsize=self.default_maxsize)
            self.sessions[session_id][channel_name] = ch
        return ch

    def subscribe(self, session_id: str, channel_name: str) -> asyncio.Queue:
        return self.channel(session_id, channel_name).q

    def transport(self, session_id: str, channel_name: str) -> ChannelTransport:
        return ChannelTransport(self.channel(session_id, channel_name))

    def drop_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def metrics(self, session_id: str) -> Dict[str, Dict[str, int]]:
        """Return simple per-channel metrics for the session."""
        out: Dict[str, Dict[str, int]] = {}
        if session_id not in self.sessions:
            return out
        for name, ch in self.sessions[session_id].items():
            out[name] = {"queue_depth": ch.depth, "dropped": ch.dropped, "maxsize": ch.maxsize}
        return out
