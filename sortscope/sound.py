"""
Sonification of sort steps.

HOW TONES ARE MADE
==================

Each request is rendered to one PCM buffer and handed to the mixer in a
single fire-and-forget call, so nothing here ever waits on audio.

WAVEFORM — sine + small 2nd harmonic:
  wave[t] = sin(2pi * f * t) + HARMONIC_BLEND * sin(4pi * f * t)

ENVELOPE — raised-cosine (Hann) attack and release, no clicks:
  Attack:  env[t] = 0.5 * (1 - cos(pi * t / A))
  Release: env[t] = 0.5 * (1 + cos(pi * (t - start) / R))

A comparison renders two tones into the same buffer, the second one
offset by COMPARE_STAGGER, so the stagger needs no timer. A swap
renders both tones at offset 0 (a chord). Mixed voices are divided by
sqrt(n_voices) to keep loudness roughly constant.

Audio is advisory. Any failure to open or drive the output is logged
and swallowed here; callers never see it.
"""

import logging
import math

import numpy as np
import pygame

from .config import (
    CHUNK_SIZE,
    COMPARE_DURATION,
    COMPARE_STAGGER,
    DEFAULT_VOLUME,
    FREQ_MAX,
    FREQ_MIN,
    HARMONIC_BLEND,
    MAX_VOICES,
    SAMPLE_RATE,
    SOUND_ATTACK,
    SOUND_RELEASE,
    SWAP_DURATION,
    TONE_DURATION,
)

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def value_to_frequency(value, max_value):
    """Map value in [0, max_value] linearly onto [FREQ_MIN, FREQ_MAX] Hz."""
    if max_value <= 0:
        return FREQ_MIN
    return FREQ_MIN + (value / max_value) * (FREQ_MAX - FREQ_MIN)


def _envelope(n, sample_rate):
    a = max(1, min(int(SOUND_ATTACK * sample_rate), n // 2))
    r = max(1, min(int(SOUND_RELEASE * sample_rate), n - a))
    env = np.ones(n, dtype=np.float64)
    t = np.arange(n, dtype=np.float64)
    env[:a] = 0.5 * (1.0 - np.cos(math.pi * t[:a] / a))
    rel_start = n - r
    env[rel_start:] = 0.5 * (1.0 + np.cos(math.pi * (t[rel_start:] - rel_start) / r))
    return env


def render_tones(tones, sample_rate=SAMPLE_RATE) -> np.ndarray:
    """
    Render (frequency, start_seconds, duration_seconds) tones into one
    mono int16 buffer.
    """
    if not tones:
        return np.zeros(0, dtype=np.int16)
    total = max(int((start + dur) * sample_rate) for _, start, dur in tones)
    buf = np.zeros(total, dtype=np.float64)
    for freq, start, dur in tones:
        off = int(start * sample_rate)
        n = min(int(dur * sample_rate), total - off)
        if n <= 0:
            continue
        t = np.arange(n, dtype=np.float64) / sample_rate
        wave = np.sin(TWO_PI * freq * t)
        if HARMONIC_BLEND > 0.0:
            wave += HARMONIC_BLEND * np.sin(TWO_PI * 2.0 * freq * t)
        buf[off:off+n] += wave * _envelope(n, sample_rate)
    buf /= math.sqrt(len(tones)) * (1.0 + HARMONIC_BLEND)
    # scale to 85% of int16 range for headroom
    return (np.clip(buf, -1.0, 1.0) * 32767 * 0.85).astype(np.int16)


# ============================================================
# ======================= AUDIO OUTPUT =======================
# ============================================================

class MixerOutput:
    """pygame.mixer as a scoped resource: opened on construction, closed by close()."""

    def __init__(self, sample_rate=SAMPLE_RATE):
        pygame.mixer.pre_init(sample_rate, -16, 2, CHUNK_SIZE)
        pygame.mixer.init()
        pygame.mixer.set_num_channels(MAX_VOICES)
        freq, _, channels = pygame.mixer.get_init()
        self.sample_rate = freq
        self.channels    = channels

    def play(self, pcm: np.ndarray, volume: float):
        frames = np.ascontiguousarray(np.repeat(pcm[:, None], self.channels, axis=1))
        snd = pygame.mixer.Sound(buffer=frames.tobytes())
        snd.set_volume(volume)
        # returns immediately; if every channel is busy the mixer drops it
        snd.play()

    def close(self):
        pygame.mixer.quit()


# ============================================================
# ===================== SONIFICATION MAPPER ==================
# ============================================================

class SonificationMapper:
    """
    Turns compare/swap events into short tones.

    The audio output is created lazily on the first audible request by
    calling `output_factory()` and released by dispose(). If the factory
    fails the mapper stays silent until dispose() is called.
    """

    def __init__(self, volume=DEFAULT_VOLUME, muted=False, output_factory=None):
        self._volume      = max(0.0, min(1.0, float(volume)))
        self._muted       = bool(muted)
        self._factory     = output_factory or MixerOutput
        self._output      = None
        self._unavailable = False
        self._warned      = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.dispose()

    # -- mapping --
    def value_to_frequency(self, value, max_value):
        return value_to_frequency(value, max_value)

    # -- playing --
    def play_tone(self, frequency, duration=TONE_DURATION):
        self._fire([(frequency, 0.0, duration)])

    def play_comparison(self, v1, v2, max_value):
        f1 = value_to_frequency(v1, max_value)
        f2 = value_to_frequency(v2, max_value)
        self._fire([(f1, 0.0, COMPARE_DURATION), (f2, COMPARE_STAGGER, COMPARE_DURATION)])

    def play_swap(self, v1, v2, max_value):
        f1 = value_to_frequency(v1, max_value)
        f2 = value_to_frequency(v2, max_value)
        self._fire([(f1, 0.0, SWAP_DURATION), (f2, 0.0, SWAP_DURATION)])

    # -- volume / mute --
    def set_volume(self, volume):
        self._volume = max(0.0, min(1.0, float(volume)))

    def get_volume(self):
        return self._volume

    def set_muted(self, muted):
        self._muted = bool(muted)

    def is_muted(self):
        return self._muted

    def toggle_mute(self):
        self._muted = not self._muted
        return self._muted

    # -- resource --
    @property
    def available(self):
        return self._output is not None

    def dispose(self):
        out, self._output = self._output, None
        self._unavailable = False
        if out is None:
            return
        try:
            out.close()
        except Exception as e:
            logger.debug("Error closing audio output: %s", e)

    def _acquire(self):
        if self._output is None and not self._unavailable:
            try:
                self._output = self._factory()
            except Exception as e:
                self._unavailable = True
                self._report("Audio output unavailable, continuing silently: %s", e)
        return self._output

    def _fire(self, tones):
        if self._muted:
            return
        out = self._acquire()
        if out is None:
            return
        try:
            rate = getattr(out, "sample_rate", SAMPLE_RATE)
            out.play(render_tones(tones, rate), self._volume)
        except Exception as e:
            self._report("Error playing tone: %s", e)

    def _report(self, msg, err):
        if self._warned:
            logger.debug(msg, err)
        else:
            logger.warning(msg, err)
            self._warned = True
