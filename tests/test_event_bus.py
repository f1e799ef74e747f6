import pytest

from msgcontract.bus.bus import ChannelTransport, EventBus
from msgcontract.errors import MessageValidationError
from msgcontract.sender import to_peer


def test_sender_hands_validated_frames_to_channel(registry):
    bus = EventBus(default_maxsize=4)
    sid = "conn-1"
    peer = to_peer(registry, bus.transport(sid, "to_peer"))
    peer.send("join", {"id": "x", "name": "y"})
    peer.send("error", {"message": "leave", "path": "", "reason": "bye"})

    q = bus.subscribe(sid, "to_peer")
    assert q.get_nowait() == {"type": "join", "payload": {"id": "x", "name": "y"}}
    assert q.get_nowait()["type"] == "error"
    assert bus.metrics(sid)["to_peer"]["queue_depth"] == 0


def test_full_channel_drops_without_blocking(registry):
    bus = EventBus(default_maxsize=1)
    sid = "conn-2"
    peer = to_peer(registry, bus.transport(sid, "to_peer"))
    peer.send("join", {"id": "a", "name": "a"})
    # second frame is dropped, send still returns the validated value
    assert peer.send("join", {"id": "b", "name": "b"}) == {"id": "b", "name": "b"}

    metrics = bus.metrics(sid)
    assert metrics["to_peer"] == {"queue_depth": 1, "dropped": 1, "maxsize": 1}
    assert bus.subscribe(sid, "to_peer").get_nowait()["payload"]["id"] == "a"


def test_rejected_payload_never_reaches_channel(registry):
    bus = EventBus()
    sid = "conn-3"
    peer = to_peer(registry, bus.transport(sid, "to_peer"))
    with pytest.raises(MessageValidationError):
        peer.send("join", {"id": 1, "name": "a"})
    assert bus.metrics(sid)["to_peer"]["queue_depth"] == 0


def test_transport_on_a_fresh_channel_name():
    bus = EventBus(default_maxsize=2)
    transport = ChannelTransport(bus.channel("conn-4", "audit"))
    transport.accept("a", 1)
    assert bus.metrics("conn-4")["audit"]["queue_depth"] == 1
    assert set(bus.metrics("conn-4")) == {"to_host", "to_peer", "audit"}


def test_drop_session():
    bus = EventBus()
    bus.channel("conn-5", "to_host")
    bus.drop_session("conn-5")
    assert bus.metrics("conn-5") == {}
