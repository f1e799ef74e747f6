import pytest

from msgcontract.contracts import ToHostContract, ToPeerContract
from msgcontract.errors import MessageValidationError, UnknownMessageError
from msgcontract.sender import MemoryTransport, TypedSender, to_host, to_peer
from msgcontract.validator import Invalid, Valid


@pytest.fixture
def transport():
    return MemoryTransport()


def test_senders_are_bound_to_one_direction(registry, transport):
    host = to_host(registry, transport)
    peer = to_peer(registry, transport)
    assert isinstance(host.contract, ToHostContract)
    assert isinstance(peer.contract, ToPeerContract)
    assert host.direction == "to_host"
    assert peer.direction == "to_peer"


def test_join_to_host_succeeds(registry, transport):
    host = to_host(registry, transport)
    value = host.send("join", {"id": "1", "name": "a"})
    assert value == {"id": "1", "name": "a"}
    assert transport.sent == [("join", {"id": "1", "name": "a"})]


def test_join_to_host_accepts_number_name(registry, transport):
    host = to_host(registry, transport)
    assert host.send("join", {"id": "3", "name": 7}) == {"id": "3", "name": 7}


def test_join_to_host_rejects_id_outside_enum(registry, transport):
    host = to_host(registry, transport)
    with pytest.raises(MessageValidationError) as exc_info:
        host.send("join", {"id": "4", "name": "a"})
    err = exc_info.value
    assert err.message_name == "join"
    assert err.path == ("id",)
    assert err.direction == "to_host"
    assert err.reason
    assert transport.sent == []


def test_direction_isolation_on_shared_name(registry, transport):
    # to-host ids are limited to "1".."3", so {"id": "x"} only passes to-peer;
    # the to-peer "etc" block is not checked on the to-host side
    host = to_host(registry, transport)
    peer = to_peer(registry, transport)
    with pytest.raises(MessageValidationError):
        host.send("join", {"id": "x", "name": "y"})
    assert peer.send("join", {"id": "x", "name": "y"}) == {"id": "x", "name": "y"}
    assert host.send("join", {"id": "2", "name": "y", "etc": 5})["etc"] == 5
    with pytest.raises(MessageValidationError) as exc_info:
        peer.send("join", {"id": "x", "name": "y", "etc": 5})
    assert exc_info.value.path == ("etc",)


def test_to_peer_optional_block(registry, transport):
    peer = to_peer(registry, transport)
    peer.send("join", {"id": "x", "name": "y", "etc": {"key": "k"}})
    with pytest.raises(MessageValidationError) as exc_info:
        peer.send("join", {"id": "x", "name": "y", "etc": {}})
    assert exc_info.value.path == ("etc", "key")
    assert exc_info.value.dotted_path == "etc.key"
    assert len(transport.sent) == 1


def test_leave_is_unknown_for_peer_sender(registry, transport):
    peer = to_peer(registry, transport)
    with pytest.raises(UnknownMessageError) as exc_info:
        peer.send("leave", {"userId": "u1"})
    assert "unknown message for direction" in str(exc_info.value)
    assert exc_info.value.direction == "to_peer"
    assert transport.sent == []


def test_leave_to_host(registry, transport):
    host = to_host(registry, transport)
    assert host.send("leave", {"userId": "u1"}) == {"userId": "u1"}
    with pytest.raises(MessageValidationError) as exc_info:
        host.send("leave", {})
    assert exc_info.value.path == ("userId",)


def test_check_does_not_send(registry, transport):
    host = to_host(registry, transport)
    assert host.check("leave", {"userId": "u1"}) == Valid({"userId": "u1"})
    assert isinstance(host.check("leave", {"userId": 1}), Invalid)
    assert transport.sent == []


def test_strict_sender_rejects_extra_fields(registry, transport):
    host = to_host(registry, transport, extra="forbid")
    with pytest.raises(MessageValidationError) as exc_info:
        host.send("leave", {"userId": "u1", "reason": "bye"})
    assert exc_info.value.path == ("reason",)


def test_sender_needs_a_contract(transport):
    with pytest.raises(TypeError):
        TypedSender({"join": None}, transport)


def test_join_to_host_rejects_coercible_name(registry, transport):
    host = to_host(registry, transport)
    for bad in (True, b"a"):
        with pytest.raises(MessageValidationError) as exc_info:
            host.send("join", {"id": "1", "name": bad})
        assert exc_info.value.path == ("name",)
    assert transport.sent == []


def test_union_failure_path_names_only_the_field(registry, transport):
    host = to_host(registry, transport)
    with pytest.raises(MessageValidationError) as exc_info:
        host.send("join", {"id": "1", "name": [1]})
    err = exc_info.value
    assert err.path == ("name",)
    assert err.dotted_path == "name"
    # one reason per union member, merged
    assert "string" in err.reason and "integer" in err.reason
