"""Reed-Solomon codec over GF(2^m) and the DAB+ superframe error corrector."""

from __future__ import annotations

import logging

_log = logging.getLogger(__name__)


class ReedSolomonError(ValueError):
    """Raised when a block holds more errors than the code can correct."""


class ReedSolomon:
    """Shortened Reed-Solomon code with configurable field and generator.

    symsize: bits per symbol; gfpoly: field generator polynomial;
    fcr: first consecutive root (index form); prim: primitive element used
    to generate the roots (index form); nroots: number of parity symbols;
    pad: number of leading virtual zero symbols of the shortened code.
    """

    def __init__(self, symsize: int, gfpoly: int, fcr: int, prim: int, nroots: int, pad: int = 0):
        if not 1 <= symsize <= 8:
            raise ValueError("symbol size must lie between 1 and 8 bits")
        field = 1 << symsize
        if not 0 <= fcr < field:
            raise ValueError("first consecutive root out of range")
        if not 0 < prim < field:
            raise ValueError("primitive element out of range")
        if not 0 <= nroots < field:
            raise ValueError("number of roots out of range")
        if not 0 <= pad < field - 1 - nroots:
            raise ValueError("padding out of range")

        nn = field - 1
        alpha_to = [0] * (nn + 1)
        index_of = [0] * (nn + 1)
        index_of[0] = nn
        alpha_to[nn] = 0
        seen: set[int] = set()
        sr = 1
        for i in range(nn):
            if sr == 0 or sr in seen:
                raise ValueError(f"field generator polynomial {gfpoly:#x} is not primitive")
            seen.add(sr)
            index_of[sr] = i
            alpha_to[i] = sr
            sr <<= 1
            if sr & field:
                sr ^= gfpoly
            sr &= nn
        if sr != 1:
            raise ValueError(f"field generator polynomial {gfpoly:#x} is not primitive")

        iprim = 1
        while iprim % prim:
            iprim += nn
        iprim //= prim

        genpoly = [0] * (nroots + 1)
        genpoly[0] = 1
        root = fcr * prim
        for i in range(nroots):
            genpoly[i + 1] = 1
            for j in range(i, 0, -1):
                if genpoly[j] != 0:
                    genpoly[j] = genpoly[j - 1] ^ alpha_to[(index_of[genpoly[j]] + root) % nn]
                else:
                    genpoly[j] = genpoly[j - 1]
            genpoly[0] = alpha_to[(index_of[genpoly[0]] + root) % nn]
            root += prim

        self.symsize = symsize
        self.nn = nn
        self.fcr = fcr
        self.prim = prim
        self.iprim = iprim
        self.nroots = nroots
        self.pad = pad
        self.block_length = nn - pad
        self.data_length = nn - nroots - pad
        self._alpha_to = alpha_to
        self._index_of = index_of
        self._genpoly = [index_of[g] for g in genpoly]

    def _symbols(self, data, expected: int, what: str) -> list[int]:
        symbols = list(bytes(data))
        if len(symbols) != expected:
            raise ValueError(f"{what} must hold {expected} symbols, got {len(symbols)}")
        if any(symbol > self.nn for symbol in symbols):
            raise ValueError(f"{what} holds symbols wider than {self.symsize} bits")
        return symbols

    def encode(self, data) -> bytes:
        """Return the codeword: data followed by its parity symbols."""
        symbols = self._symbols(data, self.data_length, "data")
        nn, nroots = self.nn, self.nroots
        alpha_to, index_of, genpoly = self._alpha_to, self._index_of, self._genpoly
        a0 = nn
        parity = [0] * nroots
        for symbol in symbols:
            feedback = index_of[symbol ^ parity[0]] if nroots else a0
            if feedback != a0:
                for j in range(1, nroots):
                    parity[j] ^= alpha_to[(feedback + genpoly[nroots - j]) % nn]
            parity = parity[1:]
            if nroots:
                parity.append(alpha_to[(feedback + genpoly[0]) % nn] if feedback != a0 else 0)
        return bytes(symbols) + bytes(parity)

    def decode(self, block) -> tuple[bytes, list[int]]:
        """Correct a codeword.

        Returns the corrected block and the sorted positions, within the
        block, that the decoder located as errors. Raises ReedSolomonError
        when the block cannot be corrected.
        """
        data = self._symbols(block, self.block_length, "block")
        nn, nroots, fcr, prim, pad = self.nn, self.nroots, self.fcr, self.prim, self.pad
        alpha_to, index_of = self._alpha_to, self._index_of
        a0 = nn
        if nroots == 0:
            return bytes(data), []

        syndromes = [data[0]] * nroots
        for symbol in data[1:]:
            for i in range(nroots):
                if syndromes[i] == 0:
                    syndromes[i] = symbol
                else:
                    syndromes[i] = symbol ^ alpha_to[(index_of[syndromes[i]] + (fcr + i) * prim) % nn]
        if not any(syndromes):
            return bytes(data), []
        s = [index_of[value] for value in syndromes]

        # Berlekamp-Massey
        lam = [1] + [0] * nroots
        b = [index_of[value] for value in lam]
        el = 0
        for r in range(1, nroots + 1):
            discr = 0
            for i in range(r):
                if lam[i] != 0 and s[r - i - 1] != a0:
                    discr ^= alpha_to[(index_of[lam[i]] + s[r - i - 1]) % nn]
            discr = index_of[discr]
            if discr == a0:
                b = [a0] + b[:-1]
                continue
            t = [lam[0]] + [
                lam[i + 1] ^ alpha_to[(discr + b[i]) % nn] if b[i] != a0 else lam[i + 1]
                for i in range(nroots)
            ]
            if 2 * el <= r - 1:
                el = r - el
                b = [a0 if value == 0 else (index_of[value] - discr + nn) % nn for value in lam]
            else:
                b = [a0] + b[:-1]
            lam = t

        lam = [index_of[value] for value in lam]
        deg_lambda = max((i for i, value in enumerate(lam) if value != a0), default=0)

        # Chien search
        reg = list(lam)
        roots: list[int] = []
        locations: list[int] = []
        k = self.iprim - 1
        for i in range(1, nn + 1):
            q = 1
            for j in range(deg_lambda, 0, -1):
                if reg[j] != a0:
                    reg[j] = (reg[j] + j) % nn
                    q ^= alpha_to[reg[j]]
            if q == 0:
                roots.append(i)
                locations.append(k)
                if len(roots) == deg_lambda:
                    break
            k = (k + self.iprim) % nn
        if len(roots) != deg_lambda:
            raise ReedSolomonError("block holds uncorrectable errors")

        deg_omega = deg_lambda - 1
        omega = []
        for i in range(deg_omega + 1):
            tmp = 0
            for j in range(i, -1, -1):
                if s[i - j] != a0 and lam[j] != a0:
                    tmp ^= alpha_to[(s[i - j] + lam[j]) % nn]
            omega.append(index_of[tmp])

        positions = []
        for root, location in zip(roots, locations):
            num1 = 0
            for i in range(deg_omega, -1, -1):
                if omega[i] != a0:
                    num1 ^= alpha_to[(omega[i] + i * root) % nn]
            num2 = alpha_to[(root * (fcr - 1) + nn) % nn]
            den = 0
            for i in range(min(deg_lambda, nroots - 1) & ~1, -1, -2):
                if lam[i + 1] != a0:
                    den ^= alpha_to[(lam[i + 1] + i * root) % nn]
            if location < pad:
                continue
            if num1 != 0:
                data[location - pad] ^= alpha_to[
                    (index_of[num1] + index_of[num2] + nn - index_of[den]) % nn
                ]
            positions.append(location - pad)
        return bytes(data), sorted(positions)


class SuperframeDecoder:
    """Corrects a DAB+ audio superframe protected by interleaved RS(120, 110)."""

    PACKET_LENGTH = 120

    def __init__(self):
        self._codec = ReedSolomon(8, 0x11D, 0, 1, 10, 135)

    def decode(self, superframe) -> tuple[bytes, int, bool]:
        """Return the corrected superframe, the number of corrected symbols
        and whether any RS packet was uncorrectable.

        Bytes past the last whole group of 120 columns are left untouched.
        """
        frame = bytearray(superframe)
        columns = len(frame) // self.PACKET_LENGTH
        span = columns * self.PACKET_LENGTH
        total = 0
        uncorrectable = False
        for column in range(columns):
            packet = frame[column:span:columns]
            try:
                corrected, positions = self._codec.decode(packet)
            except ReedSolomonError:
                uncorrectable = True
                continue
            total += len(positions)
            frame[column:span:columns] = corrected
        if total or uncorrectable:
            _log.info("superframe corrected %d symbols, uncorrectable: %s", total, uncorrectable)
        return bytes(frame), total, uncorrectable