import binascii

import pytest

from dabradio.checksums import check_firecode, crc_ccitt_check
from dabradio.dabplusdecoder import DabPlusServiceComponentDecoder
from dabradio.reedsolomon import ReedSolomon

BITRATE = 8
FRAME_SIZE = BITRATE * 3
PAD = bytes([0xA1, 0xA2, 0xA3, 0xA4])
AUDIO0 = bytes(range(1, 48))
AUDIO1 = bytes(range(100, 148))


def _crc(payload: bytes) -> bytes:
    crc = (binascii.crc_hqx(payload, 0xFFFF) ^ 0xFFFF).to_bytes(2, "big")
    assert crc_ccitt_check(payload + crc)
    return crc


def _with_firecode(body: bytes) -> bytes:
    for value in range(0x10000):
        code = value.to_bytes(2, "big")
        if check_firecode(code + body[2:11]):
            return code + body[2:]
    raise AssertionError("no fire code found")


def _build_superframe(second_start=60, break_crc=False) -> bytes:
    au0 = bytes([0x80, len(PAD)]) + PAD + AUDIO0
    au0 += _crc(au0)
    au1 = AUDIO1 + _crc(AUDIO1)
    if break_crc:
        au1 = au1[:-1] + bytes([au1[-1] ^ 0xFF])
    header = bytes([0, 0, 0x30, second_start >> 4, (second_start & 0x0F) << 4])
    body = _with_firecode(header + au0 + au1)
    assert len(body) == 110
    return ReedSolomon(8, 0x11D, 0, 1, 10, 135).encode(body)


def _frames(superframe: bytes) -> list[bytes]:
    return [superframe[i:i + FRAME_SIZE] for i in range(0, len(superframe), FRAME_SIZE)]


@pytest.fixture(scope="module")
def superframe() -> bytes:
    return _build_superframe()


def _decoder():
    decoder = DabPlusServiceComponentDecoder()
    decoder.subchannel_bitrate = BITRATE
    audio, pads = [], []
    decoder.register_audio_data_callback(lambda *args: audio.append(args))
    decoder.register_pad_data_callback(pads.append)
    return decoder, audio, pads


def test_superframe_size_follows_bitrate():
    decoder = DabPlusServiceComponentDecoder()
    assert decoder.superframe_size == 0
    decoder.subchannel_bitrate = BITRATE
    assert decoder.superframe_size == 110
    assert decoder.frame_size == FRAME_SIZE


def test_full_superframe_yields_audio_and_pad(superframe):
    decoder, audio, pads = _decoder()
    results = [decoder.process_frame(frame) for frame in _frames(superframe)]
    assert results == [False, False, False, False, True]
    assert pads == [PAD]
    assert audio == [(AUDIO0 + AUDIO1, 63, 2, 32000, True, False)]


def test_reed_solomon_corrects_damaged_byte(superframe):
    damaged = bytearray(superframe)
    damaged[30] ^= 0x5A
    decoder, audio, pads = _decoder()
    for frame in _frames(bytes(damaged)):
        decoder.process_frame(frame)
    assert audio[0][0] == AUDIO0 + AUDIO1
    assert pads == [PAD]


def test_failed_au_crc_drops_that_au():
    decoder, audio, _ = _decoder()
    for frame in _frames(_build_superframe(break_crc=True)):
        decoder.process_frame(frame)
    assert audio[0][0] == AUDIO0


def test_bad_au_start_rejects_superframe():
    decoder, audio, pads = _decoder()
    results = [decoder.process_frame(frame) for frame in _frames(_build_superframe(second_start=200))]
    assert results == [False] * 5
    assert audio == []
    assert pads == []


def test_frame_without_firecode_is_ignored(superframe):
    decoder, audio, _ = _decoder()
    assert decoder.process_frame(_frames(superframe)[1]) is False
    assert audio == []


def test_synchronisation_and_pending(superframe):
    decoder, audio, pads = _decoder()
    decoder.component_data_input(bytes([0x11] * 7) + superframe + bytes(30))
    assert decoder.pending == 5
    assert decoder.process_pending() == 5
    assert decoder.pending == 0
    assert audio[0][0] == AUDIO0 + AUDIO1
    assert pads == [PAD]


def test_synchronisation_across_chunks(superframe):
    decoder, audio, _ = _decoder()
    data = superframe + bytes(30)
    decoder.component_data_input(data[:50])
    decoder.component_data_input(data[50:])
    assert decoder.pending == 5
    decoder.process_pending()
    assert len(audio) == 1


def test_flush_drops_pending(superframe):
    decoder, audio, _ = _decoder()
    decoder.component_data_input(superframe + bytes(30))
    decoder.flush_buffered_data()
    assert decoder.pending == 0
    assert decoder.process_pending() == 0
    assert audio == []


def test_input_ignored_without_bitrate(superframe):
    decoder = DabPlusServiceComponentDecoder()
    decoder.component_data_input(superframe + bytes(30))
    assert decoder.pending == 0
    assert decoder.process_pending() == 0
    assert decoder.process_frame(_frames(superframe)[0]) is False


def test_unregistered_callback_not_called(superframe):
    decoder = DabPlusServiceComponentDecoder()
    decoder.subchannel_bitrate = BITRATE
    audio = []
    unregister = decoder.register_audio_data_callback(lambda *args: audio.append(args))
    unregister()
    results = [decoder.process_frame(frame) for frame in _frames(superframe)]
    assert results[-1] is True
    assert audio == []


def test_short_frame_raises():
    decoder, _, _ = _decoder()
    with pytest.raises(ValueError):
        decoder.process_frame(bytes([1, 2, 3]))