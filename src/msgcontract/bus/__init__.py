from .bus import Channel, ChannelTransport, EventBus

__all__ = ["Channel", "ChannelTransport", "EventBus"]
