"""Stream input decoding."""

from streamroute.stream.decoder import (
    Deaggregator,
    decode_payload,
    decode_stream_event,
    encode_record,
    kpl_deaggregator,
    passthrough_deaggregator,
)

__all__ = [
    "Deaggregator",
    "decode_payload",
    "decode_stream_event",
    "encode_record",
    "kpl_deaggregator",
    "passthrough_deaggregator",
]
