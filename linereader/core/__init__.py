"""Core building blocks of the line reader.

WHY: Line reassembly, event fan-out and option validation carry no I/O
and no scheduling, so they live apart from the reader and are tested on
plain strings and callables.

HOW: splitter.py reassembles lines across chunks, events.py is the
listener-list emitter, options.py validates and normalizes settings.

RULES:
- Nothing in this package touches the filesystem or the event loop
"""
