"""
Notification sound synthesis.

The "new message" cue is a short sine tone whose volume decays
exponentially, rendered to a 16-bit mono WAV with numpy.
"""

import io
import wave
from functools import lru_cache

import numpy as np

SAMPLE_RATE = 44100
CUE_FREQUENCY_HZ = 600
CUE_DURATION_S = 0.5
CUE_START_GAIN = 0.2
CUE_END_GAIN = 0.01


def synthesize_tone(frequency=CUE_FREQUENCY_HZ, duration=CUE_DURATION_S,
                    start_gain=CUE_START_GAIN, end_gain=CUE_END_GAIN,
                    sample_rate=SAMPLE_RATE):
    """
    Sine tone with exponential gain decay from start_gain to end_gain.

    Returns:
        numpy float array of samples in [-1, 1]
    """
    if duration <= 0 or start_gain <= 0 or end_gain <= 0:
        raise ValueError('Tone duration and gains must be positive.')

    t = np.arange(int(sample_rate * duration)) / sample_rate
    gain = start_gain * (end_gain / start_gain) ** (t / duration)
    return gain * np.sin(2 * np.pi * frequency * t)


def to_wav_bytes(samples, sample_rate=SAMPLE_RATE):
    """Encode float samples as a 16-bit mono PCM WAV file."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype('<i2')
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()


@lru_cache(maxsize=1)
def synthesize_cue():
    """The "new message" cue as WAV bytes."""
    return to_wav_bytes(synthesize_tone())
