from chatnet.message import Message


def test_size_tracks_content():
    msg = Message("hello")
    assert msg.size == len("hello")
    msg.update("hi")
    assert msg.size == len("hi")


def test_chunks_cover_content_in_order():
    text = "abcdefghij" * 11
    msg = Message(text)
    chunks = []
    while True:
        chunk = msg.get_chunk(50)
        chunks.append(chunk)
        if len(chunk) < 50:
            break
    assert "".join(chunks) == text
    assert all(len(c) == 50 for c in chunks[:-1])


def test_chunk_wraps_after_end():
    msg = Message("abcdefg")
    assert msg.get_chunk(3) == "abc"
    assert msg.get_chunk(3) == "def"
    assert msg.get_chunk(3) == "g"
    assert msg.get_chunk(3) == "abc"


def test_exact_multiple_then_wrap():
    msg = Message("abcd")
    assert msg.get_chunk(2) == "ab"
    assert msg.get_chunk(2) == "cd"
    assert msg.get_chunk(2) == "ab"


def test_empty_content_chunk():
    msg = Message()
    assert msg.get_chunk(50) == ""
    assert msg.get_chunk(50) == ""


def test_clear_resets_content_and_cursor():
    msg = Message("abcdef", "Client1")
    msg.get_chunk(2)
    msg.clear()
    assert msg.content == ""
    assert msg.size == 0
    msg.update("xyz")
    assert msg.get_chunk(2) == "xy"


def test_update_keeps_cursor():
    msg = Message("abcdef")
    assert msg.get_chunk(2) == "ab"
    msg.update("xyz123")
    assert msg.get_chunk(2) == "z1"


def test_copy_keeps_content_and_sender():
    msg = Message("hello", "Client7")
    dup = msg.copy()
    assert dup.content == "hello"
    assert dup.sender == "Client7"
    assert dup is not msg


def test_copy_starts_with_fresh_cursor():
    msg = Message("abcdef")
    msg.get_chunk(4)
    dup = msg.copy()
    assert dup.get_chunk(2) == "ab"


def test_copy_is_independent():
    msg = Message("hello")
    dup = msg.copy()
    dup.update("changed")
    assert msg.content == "hello"


def test_sender_can_be_set():
    msg = Message("text")
    assert msg.sender == ""
    msg.sender = "Client3"
    assert msg.copy().sender == "Client3"