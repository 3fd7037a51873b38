from astro_assistant.streaming.client import ChatStreamClient
from astro_assistant.streaming.decoder import DecoderState, DeltaStreamDecoder

__all__ = ["ChatStreamClient", "DecoderState", "DeltaStreamDecoder"]
