import math

IV = 31
EV = 0

# nature -> (raised stat, lowered stat); neutral natures have neither
NATURE_MODIFIERS = {
    "Hardy": (None, None),
    "Lonely": ("atk", "def"),
    "Brave": ("atk", "spe"),
    "Adamant": ("atk", "spa"),
    "Naughty": ("atk", "spd"),
    "Bold": ("def", "atk"),
    "Docile": (None, None),
    "Relaxed": ("def", "spe"),
    "Impish": ("def", "spa"),
    "Lax": ("def", "spd"),
    "Timid": ("spe", "atk"),
    "Hasty": ("spe", "def"),
    "Serious": (None, None),
    "Jolly": ("spe", "spa"),
    "Naive": ("spe", "spd"),
    "Modest": ("spa", "atk"),
    "Mild": ("spa", "def"),
    "Quiet": ("spa", "spe"),
    "Bashful": (None, None),
    "Rash": ("spa", "spd"),
    "Calm": ("spd", "atk"),
    "Gentle": ("spd", "def"),
    "Sassy": ("spd", "spe"),
    "Careful": ("spd", "spa"),
    "Quirky": (None, None),
}

NATURES = tuple(NATURE_MODIFIERS)


def nature_multiplier(nature: str, stat: str) -> float:
    up, down = NATURE_MODIFIERS.get(nature, (None, None))
    if stat == up:
        return 1.1
    if stat == down:
        return 0.9
    return 1.0


def calc_stats(base_stats: dict, level: int, nature: str = "Hardy") -> dict:
    lv = max(1, level)

    def core(base):
        return math.floor((2 * base + IV + EV // 4) * lv / 100)

    out = {"hp": core(base_stats["hp"]) + lv + 10}
    for key in ("atk", "def", "spa", "spd", "spe"):
        out[key] = math.floor((core(base_stats[key]) + 5) * nature_multiplier(nature, key))
    return out
