"""Building blocks for DAB and DAB+ digital radio: checksums, Reed-Solomon FEC, packet data, services and audio component decoders."""

__version__ = "0.1.0"