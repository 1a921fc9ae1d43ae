import json
import logging
import os
from dataclasses import asdict, dataclass, fields

logger = logging.getLogger(__name__)

# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================

WINDOW_WIDTH   = 1100
WINDOW_HEIGHT  = 680
FPS            = 120

# ---- arrays ----
DEFAULT_SIZE = 50
SIZE_MIN     = 10
SIZE_MAX     = 200
VALUE_MIN    = 10
VALUE_MAX    = 500

# ---- playback ----
# "speed" is the delay in milliseconds between two auto-advance ticks.
DEFAULT_SPEED = 50
SPEED_MIN     = 1
SPEED_MAX     = 500

DEFAULT_ALGORITHM = "bubble"

# ============================================================
# ====================== SOUND SETTINGS ======================
# ============================================================
#
# FREQ_MIN / FREQ_MAX — the value range [0, max] maps linearly onto
#   this band. 200..800 Hz stays audible on laptop speakers.
FREQ_MIN = 200.0
FREQ_MAX = 800.0
#
# Tone lengths in seconds. A comparison plays two short tones, the
# second COMPARE_STAGGER after the first. A swap plays a chord.
TONE_DURATION    = 0.10
COMPARE_DURATION = 0.05
COMPARE_STAGGER  = 0.025
SWAP_DURATION    = 0.08
#
# SOUND_ATTACK / SOUND_RELEASE — raised-cosine (Hann) fade lengths.
#   env[t] = 0.5 * (1 - cos(pi * t / attack_samples))
SOUND_ATTACK  = 0.005
SOUND_RELEASE = 0.020
#
# HARMONIC_BLEND — amount of 2nd harmonic mixed into each sine.
HARMONIC_BLEND = 0.08
#
# MAX_VOICES — mixer channels; requests beyond this are dropped by the mixer.
MAX_VOICES = 24

SAMPLE_RATE    = 44100
CHUNK_SIZE     = 512
DEFAULT_VOLUME = 0.3

# ============================================================
# ===================== SAVED PREFERENCES ====================
# ============================================================

SETTINGS_DIR  = os.environ.get("SORTSCOPE_HOME") or os.path.expanduser("~/.sortscope")
SETTINGS_FILE = os.path.join(SETTINGS_DIR, "settings.json")


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass
class Settings:
    """UI preferences remembered between runs."""
    algorithm: str = DEFAULT_ALGORITHM
    size:      int = DEFAULT_SIZE
    speed:     int = DEFAULT_SPEED
    volume:    float = DEFAULT_VOLUME
    muted:     bool = False

    def normalized(self) -> "Settings":
        return Settings(
            algorithm=str(self.algorithm),
            size=int(clamp(int(self.size), SIZE_MIN, SIZE_MAX)),
            speed=int(clamp(int(self.speed), SPEED_MIN, SPEED_MAX)),
            volume=float(clamp(float(self.volume), 0.0, 1.0)),
            muted=bool(self.muted),
        )


def load_settings(path=None) -> Settings:
    """
    Read saved preferences. A missing or unreadable file gives defaults;
    unknown keys are ignored and out-of-range values are clamped.
    """
    path = path or SETTINGS_FILE
    if not os.path.exists(path):
        return Settings()
    try:
        with open(path) as f:
            raw = json.load(f)
        known = {fld.name for fld in fields(Settings)}
        return Settings(**{k: v for k, v in raw.items() if k in known}).normalized()
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()


def save_settings(settings: Settings, path=None) -> bool:
    path = path or SETTINGS_FILE
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(settings), f, indent=2)
        return True
    except OSError as e:
        logger.warning("Could not save settings to %s: %s", path, e)
        return False
