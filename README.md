# dabradio

Pure-Python building blocks for decoding DAB and DAB+ digital radio streams.
The package has no dependencies outside the standard library.

## What is inside

- `dabradio.base64codec` – base64 encoding and decoding: `base64_encode(data, url=False)`,
  `base64_encode_pem`, `base64_encode_mime` and `base64_decode(encoded, remove_linebreaks=False)`.
  The URL variant uses `-`, `_` and `.` padding; decoding accepts both alphabets, treats
  padding in the last chunk as optional and raises `ValueError` on invalid input.
- `dabradio.crc24q` – the CRC-24Q checksum: `crc24q_hash`, `crc24q_sign` (appends the
  three CRC bytes) and `crc24q_check` (raises `ValueError` for fewer than three bytes).
- `dabradio.checksums` – `crc_ccitt_check`, the inverted CRC-CCITT check used on DAB
  packets and access units, and `check_firecode`, the DAB+ superframe Fire code check.
- `dabradio.reedsolomon` – `ReedSolomon`, a configurable Reed-Solomon codec with
  `encode(data)` and `decode(block)`; `decode` returns the corrected block and the
  error positions, or raises `ReedSolomonError`. `SuperframeDecoder.decode(superframe)`
  corrects a DAB+ audio superframe protected by interleaved RS(120, 110) and returns the
  corrected bytes, the number of corrected symbols and whether any packet was uncorrectable.
- `dabradio.datapacket` – `DataPacket(seq, data)`, an MSC packet-mode data packet with
  properties for the address, continuity index, first/last flags, announced length,
  useful data length, FEC counter and CRC validity. `str()` gives a header line and a hex dump.
- `dabradio.datafec` – `DataFec`, which collects packets through `packet_input` and runs
  packet-mode FEC once the last FEC packet of a group arrives, correcting the data
  packets in place and marking them `fec_handled`.
- `dabradio.servicecomponent` – `ServiceComponentType` and the abstract `ServiceComponent`.
- `dabradio.service` – `Service`; programme type names are looked up in the class
  attribute `Service.programme_type_names`, which is empty by default.
- `dabradio.componentdecoder` – `ServiceComponentDecoder`, the abstract base of the audio
  component decoders. Setting `subchannel_bitrate` (kbit/s) sets `frame_size` to three
  bytes per kbit/s.
- `dabradio.mpegdecoder` – `MpegServiceComponentDecoder` for MPEG-1/2 Layer II (DAB) audio.
- `dabradio.dabplusdecoder` – `DabPlusServiceComponentDecoder` for HE-AAC (DAB+) audio.

## Installing

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Examples

Checksums:

```python
from dabradio.crc24q import crc24q_hash, crc24q_sign, crc24q_check

signed = crc24q_sign(b"hello")
assert crc24q_check(signed)
print(hex(crc24q_hash(b"hello")))
```

Reed-Solomon:

```python
from dabradio.reedsolomon import ReedSolomon

codec = ReedSolomon(8, 0x11D, 0, 1, 16, 0)
codeword = bytearray(codec.encode(bytes(codec.data_length)))
codeword[5] ^= 0xFF
corrected, positions = codec.decode(codeword)
assert positions == [5]
```

Decoding DAB+ audio: feed the subchannel's bytes in, then process the queued frames.

```python
from dabradio.dabplusdecoder import DabPlusServiceComponentDecoder

decoder = DabPlusServiceComponentDecoder()
decoder.subchannel_bitrate = 96          # kbit/s, from the subchannel organisation

def on_audio(data, audio_type, channels, sampling_rate, sbr, ps):
    print(len(data), channels, sampling_rate, sbr, ps)

def on_pad(pad):
    print("PAD", pad.hex())

unregister_audio = decoder.register_audio_data_callback(on_audio)
decoder.register_pad_data_callback(on_pad)

for chunk in subchannel_chunks:          # your source of subchannel bytes
    decoder.component_data_input(chunk)
    decoder.process_pending()

unregister_audio()
```

`MpegServiceComponentDecoder` is used the same way for DAB (MPEG Layer II) services; its
audio callback receives each whole frame.

Registering a callback returns a function; calling it unregisters the callback.

## What this package does not do

- It does not talk to a tuner or any receiver hardware; you supply the subchannel bytes.
- It does not parse the FIC or build an ensemble: `Service` and `ServiceComponent` hold
  service information, but filling them in is up to the caller.
- It does not decode audio to PCM: the decoders hand out MPEG Layer II frames and AAC
  access units for an audio decoder of your choice.
- It has no command-line program.