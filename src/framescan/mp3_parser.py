from dataclasses import dataclass
from typing import List, Iterator

from .tables import (
    BITRATES_KBPS, SAMPLE_RATES_HZ, SAMPLES_PER_FRAME, FRAME_SIZE_COEFF, HEADER_LEN,
)

@dataclass(frozen=True)
class FrameHeader:
    offset: int
    bitrate_index: int
    samplerate_index: int
    padding: int

    @property
    def bitrate(self) -> int:
        """Bits per second, 0 for a reserved index."""
        return BITRATES_KBPS[self.bitrate_index] * 1000

    @property
    def samplerate(self) -> int:
        return SAMPLE_RATES_HZ[self.samplerate_index]

    @property
    def is_valid(self) -> bool:
        return self.bitrate != 0 and self.samplerate != 0

    @property
    def size(self) -> int:
        if not self.is_valid:
            return 0
        return (FRAME_SIZE_COEFF * self.bitrate) // self.samplerate + self.padding

    @property
    def duration_sec(self) -> float:
        if not self.is_valid:
            return 0.0
        return SAMPLES_PER_FRAME / float(self.samplerate)


def has_sync(buffer, offset: int) -> bool:
    """11 set bits: 0xFF then the top 3 bits of the next byte."""
    return buffer[offset] == 0xFF and (buffer[offset + 1] & 0xE0) == 0xE0

def read_header(buffer, offset: int) -> FrameHeader:
    b2 = int(buffer[offset + 2])
    return FrameHeader(
        offset=offset,
        bitrate_index=(b2 & 0xF0) >> 4,
        samplerate_index=(b2 & 0x0C) >> 2,
        padding=(b2 & 0x02) >> 1,
    )

def _walk(buffer) -> Iterator[FrameHeader]:
    # Yields every header met; the last one is invalid when the walk halted.
    i = 0; n = len(buffer)
    while i <= n - HEADER_LEN:
        if has_sync(buffer, i):
            header = read_header(buffer, i)
            yield header
            if not header.is_valid:
                return
            i += header.size
        else:
            i += 1

def iter_frames(buffer) -> Iterator[FrameHeader]:
    """Walk `buffer` frame by frame, yielding each valid header.

    Non-sync bytes are skipped one at a time. The walk ends for good at the
    first header carrying a reserved bitrate or sample-rate index, even if
    valid frames follow it.
    """
    for header in _walk(buffer):
        if not header.is_valid:
            return
        yield header

def count_frames(buffer) -> int:
    """Number of MPEG-1 Layer III frames found in `buffer` (0 when none)."""
    return sum(1 for _ in iter_frames(buffer))


class MP3Stream:
    def __init__(self, data):
        self.data = data
        self.frames: List[FrameHeader] = []
        self.halted = False
        self._scan()

    def _scan(self):
        for header in _walk(self.data):
            if not header.is_valid:
                self.halted = True
                break
            self.frames.append(header)

    def __len__(self) -> int:
        return len(self.frames)

    def stats(self):
        total = len(self.frames)
        padded = sum(1 for fr in self.frames if fr.padding)
        duration = sum(fr.duration_sec for fr in self.frames)
        return {"total_frames": total, "padded_frames": padded, "duration_sec": duration,
                "halted": self.halted, "valid": total > 0}
