# MPEG-1 Layer III lookup tables, indexed by the raw header field.
# A zero entry marks a reserved index.
BITRATES_KBPS = (
    0, 32, 40, 48, 56, 64, 80, 96,
    112, 128, 160, 192, 224, 256, 320, 0,
)
SAMPLE_RATES_HZ = (44100, 48000, 32000, 0)

SAMPLES_PER_FRAME = 1152
FRAME_SIZE_COEFF = 144  # SAMPLES_PER_FRAME / 8

HEADER_LEN = 4
