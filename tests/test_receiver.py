import logging
import socket

import pytest

from chatnet.message import Message
from chatnet.packet import MSG_BEGIN, MSG_END, Packet
from chatnet.receiver import MessageReceiver, split_into_packets


def _frames(*bodies):
    return b"".join(Packet(body).serialize() for body in bodies)


def _message_bytes(content, announced=None):
    size = len(content) if announced is None else announced
    return _frames(f"{MSG_BEGIN}<size>: {size}", content, MSG_END)


def test_split_finds_each_packet():
    data = _frames("first", "second")
    pieces = split_into_packets(data)
    assert [Packet.deserialize(piece).body for piece in pieces] == ["first", "second"]


def test_split_starts_at_begin_marker():
    serialized = Packet("abc").serialize()
    pieces = split_into_packets(serialized)
    assert pieces == [serialized[4:]]
    assert pieces[0].startswith(b"PB->")
    assert pieces[0].endswith(b"<-PE")


def test_split_drops_incomplete_tail():
    complete = Packet("whole").serialize()
    partial = Packet("cut off").serialize()[:-3]
    pieces = split_into_packets(complete + partial)
    assert len(pieces) == 1
    assert Packet.deserialize(pieces[0]).body == "whole"


def test_split_without_markers_is_empty():
    assert split_into_packets(b"no markers here") == []


def test_feed_completes_message():
    receiver = MessageReceiver()
    messages = receiver.feed(_message_bytes("hello"))
    assert [m.content for m in messages] == ["hello"]


def test_feed_across_several_calls():
    receiver = MessageReceiver()
    head = _frames(f"{MSG_BEGIN}<size>: 10", "hello")
    tail = _frames("world", MSG_END)
    assert receiver.feed(head) == []
    messages = receiver.feed(tail)
    assert [m.content for m in messages] == ["helloworld"]


def test_feed_several_messages_in_order():
    receiver = MessageReceiver()
    messages = receiver.feed(_message_bytes("one") + _message_bytes("two"))
    assert [m.content for m in messages] == ["one", "two"]


def test_size_mismatch_drops_message(caplog):
    receiver = MessageReceiver()
    with caplog.at_level(logging.WARNING, logger="chatnet.receiver"):
        messages = receiver.feed(_message_bytes("hello", announced=10))
    assert messages == []
    assert "corrupted" in caplog.text


def test_packets_before_start_are_kept_in_message():
    receiver = MessageReceiver()
    data = _frames("junk") + _message_bytes("hello")
    assert receiver.feed(data) == []


def test_empty_message_is_not_returned():
    receiver = MessageReceiver()
    assert receiver.feed(_message_bytes("")) == []


def test_recovers_after_corrupted_message():
    receiver = MessageReceiver()
    data = _message_bytes("bad", announced=7) + _message_bytes("good")
    messages = receiver.feed(data)
    assert [m.content for m in messages] == ["good"]


def test_retrieve_from_connection():
    left, right = socket.socketpair()
    with left, right:
        right.settimeout(2)
        left.sendall(_message_bytes("over the wire") + _message_bytes("second"))
        receiver = MessageReceiver()
        first = receiver.retrieve_last_message(right)
        second = receiver.retrieve_last_message(right)
    assert first == Message("over the wire")
    assert second.content == "second"


def test_retrieve_raises_when_peer_closes():
    left, right = socket.socketpair()
    with right:
        right.settimeout(2)
        left.sendall(_frames(f"{MSG_BEGIN}<size>: 4", "half"))
        left.close()
        receiver = MessageReceiver()
        with pytest.raises(ConnectionError):
            receiver.retrieve_last_message(right)