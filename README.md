# chatnet

A small TCP chat system: a server that accepts any number of clients and
relays every message it receives to all the other identified clients, and a
console client that sends lines read from standard input and prints what
arrives.

## Installing

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Running

Start the server:

    chatnet-server --host 127.0.0.1 --port 8001

Options:

- `--host` — address to bind to (default `192.168.31.49`; on most machines
  you will want to pass your own address or `127.0.0.1`);
- `--port` — port to listen on (default `8001`);
- `--connections` — length of the accept queue (default `2`).

The server runs until interrupted with Ctrl+C.

Then start one or more clients, each in its own terminal:

    chatnet-client --host 127.0.0.1 --port 8001

The client takes `--host` (default `192.168.31.49`) and `--port` (default
`8001`). It prints the prompt `Enter msg to send: `, sends every line typed
to the server, and prints every message that arrives from the server. It
stops at end of input (Ctrl+D, or Ctrl+Z then Enter on Windows). If the
connection cannot be made it prints `Failed to connect to server: ...` to
standard error and exits with status 1.

On connecting, a client first announces itself with a message
`client_id: Client<N>`, where `<N>` is the number of its local socket. The
server takes everything after `client_id: ` as the user's id. Until a user
has an id, the server accepts nothing else from it and sends nothing to it.
Once it has one, each of its messages is printed on the server's console as
`<id>: <text>` and forwarded to every other identified user.

## The wire protocol

Messages travel as a sequence of framed packets. Text is encoded as UTF-8.

A packet is serialized as:

1. a 4-byte little-endian signed integer holding the length of the begin
   marker, followed by the marker `PB->`;
2. a 4-byte integer holding the body length, followed by the body;
3. a 4-byte integer holding the length of the end marker, followed by the
   marker `<-PE`.

A receiver finds packets by searching the raw bytes for `PB->` and `<-PE`,
so the length prefix of the begin marker is not checked on reading.

A message is sent as:

1. a header packet whose body is `MPB-><size>: N`, where `N` is the length
   of the message content;
2. the content, cut into packets of at most 50 characters; a packet shorter
   than a full one ends the content (a message whose length is an exact
   multiple of 50 is followed by an empty packet);
3. a trailer packet whose body is `<-MPE`.

A receiver joins the content packets between header and trailer. If the
joined length differs from the size announced in the header, a warning is
logged and the message is dropped; empty messages are dropped as well.
Packets that cannot be decoded count as empty ones.

## Library use

The building blocks are importable on their own:

- `chatnet.packet` — `Packet` with `serialize()` and the class method
  `deserialize(data)`, the `is_msg_start()` / `is_msg_end()` checks,
  `service_info()` returning the announced size as a `ServiceInfo` (or
  `None` for other packets), and `PacketError` for malformed frames.
- `chatnet.message` — `Message`, a piece of chat text with a `sender`, a
  `size` property, `get_chunk(chunk_size)` for reading it out in chunks
  (wrapping to the start once exhausted), `clear()`, `update(new_content)`
  and `copy()`.
- `chatnet.sender` — `MessageSender(packet_size=50)`, whose `encode(message)`
  returns the list of serialized packets and whose `send(message,
  connection)` writes them with `connection.sendall`.
- `chatnet.receiver` — `split_into_packets(data)` for cutting raw bytes into
  frames, and `MessageReceiver`, whose `feed(data)` returns the messages the
  bytes complete and whose `retrieve_last_message(connection)` reads from
  `connection.recv` until a whole message has arrived, raising
  `ConnectionError` if the peer closes first.
- `chatnet.sockets` — `ServerSocket(host, port)` with `listen`, `accept`,
  `close` and an `address` property, and `ClientSocket` with `connect`,
  `recv`, `sendall`, `shutdown` and `close`. Both are context managers.
- `chatnet.user` — `User(connection, user_id=None, *, start_receiving=True)`,
  one connected peer with a background thread running `receive_messages()`,
  plus `get_last_message()` (the oldest queued message or `None`),
  `send_response(message)` and `close()`.
- `chatnet.server` — `TCPServer(host, port, connections_per_socket=2, *,
  output=None)` with `run()`, `shutdown()`, `handle(user)`,
  `broadcast_pending()` and `write_to_console(text)`; `main()` is the
  `chatnet-server` command.
- `chatnet.client` — `TCPClient(*, output=None)` with `connect(host, port)`,
  `send(text)`, `listen()` and `disconnect()`; `main()` is the
  `chatnet-client` command.

## What it does not do

There is no authentication, no encryption, no message history or other
storage, and no private messages: every message from an identified user goes
to all other identified users, and messages sent before a client connected
are not delivered to it.