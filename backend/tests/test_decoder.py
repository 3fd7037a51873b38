"""Tests for the incremental delta-stream decoder."""

import pytest

from astro_assistant.streaming.decoder import DecoderState, DeltaStreamDecoder
from fakes import Recorder


def make_decoder(recorder):
    return DeltaStreamDecoder(recorder.on_delta, recorder.on_done)


def frame(content):
    return '{"choices":[{"delta":{"content":%s}}]}' % ('"' + content + '"')


MIXED_STREAM = (
    ": keep-alive\n"
    "\n"
    f"data: {frame('The ')}\r\n"
    "\r\n"
    "event: message\n"
    'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
    f"data: {frame('Moon ')}\n"
    f"data:   {frame('is in ')}   \n"
    'data: {"choices":[{"delta":{"content":""}}]}\n'
    f"data: {frame('Cancer')}\n\n"
    "data: [DONE]\n\n"
)


def test_hello_scenario(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b'data: {"choices":[{"delta":{"content":"Hel"}}]}\n')
    decoder.feed(b'data: {"choices":[{"delta":{"content":"lo"}}]}\n')
    decoder.feed(b"data: [DONE]\n")

    assert recorder.fragments == ["Hel", "lo"]
    assert recorder.done == 1
    assert recorder.text == "Hello"
    assert decoder.state is DecoderState.DONE


def test_payload_split_across_chunks(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b'data: {"choices":[{"delta":{"conten')

    assert recorder.fragments == []
    assert decoder.pending == 'data: {"choices":[{"delta":{"conten'

    decoder.feed(b't":"hi"}}]}\n')

    assert recorder.fragments == ["hi"]
    assert decoder.pending == ""
    assert recorder.done == 0


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 16, 50, 4096])
def test_fragments_do_not_depend_on_chunking(chunk_size):
    recorder = Recorder()
    decoder = make_decoder(recorder)
    data = MIXED_STREAM.encode()

    for start in range(0, len(data), chunk_size):
        decoder.feed(data[start:start + chunk_size])
    decoder.finish()

    assert recorder.fragments == ["The ", "Moon ", "is in ", "Cancer"]
    assert recorder.done == 1


def test_multibyte_character_split_between_chunks(recorder):
    decoder = make_decoder(recorder)
    data = f"data: {frame('नमस्ते 🌙')}\n".encode()
    split = data.index("🌙".encode()) + 2

    decoder.feed(data[:split])
    decoder.feed(data[split:])

    assert recorder.fragments == ["नमस्ते 🌙"]


def test_done_stops_processing_rest_of_chunk(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(f"data: {frame('a')}\ndata: [DONE]\ndata: {frame('b')}\n".encode())

    assert recorder.fragments == ["a"]
    assert recorder.done == 1


def test_nothing_fires_after_done(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b"data: [DONE]\n")
    decoder.feed(f"data: {frame('late')}\n".encode())
    decoder.finish()

    assert recorder.fragments == []
    assert recorder.done == 1


def test_done_sentinel_with_surrounding_whitespace(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b"data:   [DONE]  \r\n")

    assert recorder.done == 1


def test_non_data_lines_are_ignored(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b": ping\n\nevent: update\nid: 7\nretry: 1000\n")
    decoder.feed(f"data:{frame('no space')}\n".encode())

    assert recorder.fragments == []
    assert recorder.done == 0
    assert decoder.pending == ""


def test_payloads_without_text_are_skipped(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b'data: {"choices":[]}\n')
    decoder.feed(b'data: {"choices":[{"finish_reason":"stop"}]}\n')
    decoder.feed(b'data: {"choices":[{"delta":{"content":null}}]}\n')
    decoder.feed(b'data: {"choices":[{"delta":{"content":42}}]}\n')
    decoder.feed(b"data: [1, 2, 3]\n")

    assert recorder.fragments == []


def test_unparseable_line_goes_back_to_front_of_buffer(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(b"data: {broken\r\n")

    assert decoder.pending == "data: {broken\n"

    decoder.feed(f"data: {frame('next')}\n".encode())

    assert recorder.fragments == []
    assert decoder.pending.startswith("data: {broken\n")


def test_stream_end_without_sentinel_signals_done_once(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(f"data: {frame('partial')}\ndata: {{\"choi".encode())
    decoder.finish()
    decoder.finish()

    assert recorder.fragments == ["partial"]
    assert recorder.done == 1
    assert decoder.pending == ""


def test_cancel_is_silent_and_terminal(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(f"data: {frame('one')}\n".encode())
    decoder.cancel()
    decoder.feed(f"data: {frame('two')}\n".encode())
    decoder.finish()

    assert recorder.fragments == ["one"]
    assert recorder.done == 0
    assert decoder.cancelled
    assert decoder.is_done


def test_decoders_do_not_share_buffers():
    first, second = Recorder(), Recorder()
    a = make_decoder(first)
    b = make_decoder(second)

    a.feed(b'data: {"choices":[{"delta":{"content":"A"')
    b.feed(f"data: {frame('B')}\n".encode())
    a.feed(b"}}]}\n")

    assert first.fragments == ["A"]
    assert second.fragments == ["B"]


def test_accepts_text_chunks(recorder):
    decoder = make_decoder(recorder)
    decoder.feed(f"data: {frame('text')}\n")

    assert recorder.fragments == ["text"]
