"""Tests for the pausable chunked file source.

WHY: The reader's flow control only works if the source really stops
when paused, continues from the next unread byte when resumed,
and goes silent after destroy().

HOW: Each test drives a FileByteSource on its own event loop via
asyncio.run(), recording events in order.

RULES:
- chunk sizes are tiny so every file spans several reads
"""

import asyncio

from linereader.source import FileByteSource

from conftest import drain_ticks


def _record(source):
    events = []
    source.on("open", lambda: events.append(("open", None)))
    source.on("data", lambda chunk: events.append(("data", chunk)))
    source.on("end", lambda: events.append(("end", None)))
    source.on("error", lambda exc: events.append(("error", exc)))
    return events


class TestDelivery:
    def test_chunks_arrive_in_order_then_end(self, make_file):
        path = make_file("abcdefghij")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=4)
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert events == [
            ("open", None),
            ("data", "abcd"),
            ("data", "efgh"),
            ("data", "ij"),
            ("end", None),
        ]

    def test_terminators_are_not_translated(self, make_file):
        path = make_file(b"a\r\nb\rc\n")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=100)
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert ("data", "a\r\nb\rc\n") in events

    def test_multibyte_characters_survive_small_chunks(self, make_file):
        path = make_file("héllo wörld")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=1)
            events = _record(source)
            source.open()
            await drain_ticks(100)
            return events

        events = asyncio.run(_run())
        text = "".join(payload for name, payload in events if name == "data")
        assert text == "héllo wörld"

    def test_empty_file_emits_end_only(self, make_file):
        path = make_file(b"")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=4)
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        assert asyncio.run(_run()) == [("open", None), ("end", None)]


class TestFlowControl:
    def test_pause_in_data_listener_stops_delivery(self, make_file):
        path = make_file("abcdefgh")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=2)
            events = _record(source)
            source.on("data", lambda chunk: source.pause())
            source.open()
            await drain_ticks()
            paused_events = list(events)

            source.resume()
            await drain_ticks()
            return paused_events, events

        paused_events, events = asyncio.run(_run())
        assert paused_events == [("open", None), ("data", "ab")]
        assert events[:3] == [("open", None), ("data", "ab"), ("data", "cd")]

    def test_resume_continues_from_next_unread_byte(self, make_file):
        path = make_file("abcdefgh")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=3)
            chunks = []

            def on_data(chunk):
                chunks.append(chunk)
                source.pause()
                asyncio.get_running_loop().call_soon(source.resume)

            source.on("data", on_data)
            ended = []
            source.on("end", lambda: ended.append(True))
            source.open()
            await drain_ticks()
            return chunks, ended

        chunks, ended = asyncio.run(_run())
        assert chunks == ["abc", "def", "gh"]
        assert ended == [True]

    def test_destroy_silences_source(self, make_file):
        path = make_file("abcdefgh")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=2)
            events = _record(source)
            source.on("data", lambda chunk: source.destroy())
            source.open()
            await drain_ticks()
            source.resume()
            await drain_ticks()
            return source, events

        source, events = asyncio.run(_run())
        assert events == [("open", None), ("data", "ab")]
        assert source.destroyed is True


class TestErrors:
    def test_missing_file_emits_error(self, tmp_path):
        async def _run():
            source = FileByteSource(str(tmp_path / "nope.txt"), encoding="utf8", chunk_size=4)
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert len(events) == 1
        name, exc = events[0]
        assert name == "error"
        assert isinstance(exc, FileNotFoundError)

    def test_strict_decoding_failure_emits_error(self, make_file):
        path = make_file(b"ok\n\xff\xfe\xfa broken")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=64, errors="strict")
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert events[:2] == [("open", None), ("data", "ok\n")]
        assert [name for name, _ in events] == ["open", "data", "error"]
        assert isinstance(events[-1][1], UnicodeDecodeError)

    def test_characters_split_before_bad_byte_are_kept(self, make_file):
        path = make_file(b"a\xc3\xa9\xff")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=2, errors="strict")
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert events[1:3] == [("data", "a"), ("data", "é")]
        assert events[-1][0] == "error"

    def test_file_ending_mid_character_fails_strictly(self, make_file):
        path = make_file(b"ok\xc3")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=64, errors="strict")
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert events[:2] == [("open", None), ("data", "ok")]
        assert events[-1][0] == "error"
        assert "end" not in [name for name, _ in events]

    def test_replace_policy_never_fails(self, make_file):
        path = make_file(b"ok\n\xff broken")

        async def _run():
            source = FileByteSource(str(path), encoding="utf8", chunk_size=64, errors="replace")
            events = _record(source)
            source.open()
            await drain_ticks()
            return events

        events = asyncio.run(_run())
        assert events[-1] == ("end", None)
        text = "".join(payload for name, payload in events if name == "data")
        assert text == "ok\n� broken"
