# oscwire

A small library for working with Open Sound Control (OSC) data, using only
the standard library. It covers:

- building and parsing OSC messages with every common argument type
  (`i f s b h t d S c r m T F N I` and the `[` `]` array markers)
- building OSC bundles, nesting them and reading them back
- matching message addresses against dispatch patterns, including
  `{a,b}` options, `*`, `#N` enumerations and `:types` argument restrictions
- converting between OSC time tags and Python times
- a ring buffer (`ThreadLink`) that passes messages from one thread to another
- an undo history that merges changes to the same address made close together

## Installation

```
pip install oscwire
```

## Messages (`oscwire.message`)

Messages are plain `bytes`.

```python
from oscwire.message import build_message, argument, arg_type, narguments

msg = build_message("/testing", "is", 23, "this string")
narguments(msg)      # 2
arg_type(msg, 1)     # 's'
argument(msg, 0)     # 23
argument(msg, 1)     # 'this string'
```

Strings take `str` or `bytes` without NUL bytes, blobs take a bytes-like
value, MIDI arguments take exactly four bytes, `c` also accepts a
one-character string, and `T`, `F`, `N`, `I`, `[` and `]` take no value.
A wrong number of values raises `TypeError`; an unknown type tag raises
`ValueError`.

- `message_size(address, types, *args)` returns the encoded size.
- `build_message(..., max_length=n)` raises `MessageTooLong` (a
  `ValueError`) if the message would be longer than `n` bytes.
- `iter_arguments(msg)` yields an `Arg(type, value)` for every argument,
  skipping array brackets; `argument_string(msg)` returns the type tags.
- `message_length(data)` returns the length of the message or bundle at the
  start of `data`, or 0 if it is incomplete; `message_ring_length(*segments)`
  does the same for data split across several pieces.
- `is_valid_message(data)` checks that `data` is exactly one well-formed
  message with a printable address starting with `/`.

## Bundles (`oscwire.bundle`)

```python
from oscwire.message import build_message
from oscwire.bundle import build_bundle, bundle_elements, bundle_fetch, bundle_timetag

a = build_message("/bundle", "s", "bundle")
b = build_bundle(0xDEADBEEFCAFEBAAD, a, a)
bundle_elements(b)    # 2
bundle_fetch(b, 0)    # the bytes of the first element
bundle_timetag(b)     # 0xDEADBEEFCAFEBAAD
```

Bundles can contain other bundles. `is_bundle` tests for the `#bundle`
header and `bundle_size(data, index)` gives the size of one element.
Fetching an element that is not there raises `IndexError`.

## Pattern matching (`oscwire.matching`)

```python
from oscwire.matching import match_path, match, match_partial

match_path("volume#16", "volume3")               # ('', 7): 3 < 16
match_path("{left,right}/gain", "right/gain")    # ('', 10)
match_path("volume#16", "volume20")              # None
match("gain:f", build_message("gain", "f", 0.5)) # True
match_partial("abc", "a?c")                      # True
```

`match_path` returns the rest of the pattern (empty or starting with `:`)
and the index in the path where matching stopped, or `None`. `match` also
checks a message's type tags against `:types` restrictions; a plain string
is taken as a message without arguments. `match_partial` matches a single
path segment against `?`, `[...]` sets, a trailing `*` or a `#N` suffix;
`subpath_pattern_type` classifies such a segment as a `PatternType`.
This is not a complete OSC pattern matcher: it never backtracks.

## Time tags (`oscwire.timetag`)

Time tags are integers: 32 bits of seconds and 32 bits of second fractions.

```python
from oscwire.timetag import timetag_from_time, seconds_from_timetag, immediately

tt = timetag_from_time(1_700_000_000, 0)
seconds_from_timetag(tt)    # 1700000000
immediately()               # 1
```

`current_timetag`, `timetag_from_datetime` and `datetime_from_timetag`
convert to and from the clock (naive datetimes are local time).
`float_to_secfracs` and `secfracs_to_float` convert between a fraction of a
second, at single precision, and the fractional part of a time tag.

## Thread link (`oscwire.thread_link`)

```python
from oscwire.thread_link import ThreadLink

link = ThreadLink(512, 100)        # max message length, number of messages
link.write("/setint", "i", 123)    # False if the message was dropped
while link.has_next():
    msg = link.read()
```

`raw_write` queues an already built message, `write_array` takes the
arguments as a sequence, and `read_lookahead` / `has_next_lookahead` walk a
second queue position that every normal `read` resets. `peek` returns the
last message read.

## Undo history (`oscwire.undo`)

Each event is a message whose arguments are the changed address, the old
value and the new value:

```python
from oscwire.message import build_message
from oscwire.undo import UndoHistory

sent = []
history = UndoHistory(callback=sent.append)
history.record_event(build_message("/undo_change", "sff", "/volume", 0.2, 0.8))
history.seek_history(-1)   # undo: sends /volume with 0.2 to the callback
history.seek_history(1)    # redo: sends /volume with 0.8
```

At most 20 events are kept; a change to the same address within two
seconds is merged into the earlier event. A `clock` function can be passed
to control time.

## What it does not do

oscwire only builds, reads and queues bytes. It has no network transport
(no UDP or TCP sockets, no server) and no tree of ports to dispatch
messages to handlers.

## Running the tests

```
pip install -e ".[test]"
pytest
```