"""Parse cache durations such as `3d12h` into milliseconds."""
import re

from swmanifest.errors import ConfigurationError

PARSE_TO_PAIRS = re.compile(r"[0-9]+[^0-9]+")
PAIR_SPLIT = re.compile(r"^([0-9]+)([dhmsu]+)$")

UNIT_FACTORS_MS = {
    "d": 86_400_000,
    "h": 3_600_000,
    "m": 60_000,
    "s": 1_000,
    "u": 1,
}


def parse_duration_to_ms(duration: str) -> int:
    """
    Sum every `<number><unit>` pair of a duration string.

    Units: d(ays), h(ours), m(inutes), s(econds), u (milliseconds).
    An empty string is a zero duration.

    Raises:
        ConfigurationError: A pair is malformed or uses an unknown unit
    """
    total = 0
    for pair in PARSE_TO_PAIRS.findall(duration):
        res = PAIR_SPLIT.match(pair)
        if res is None:
            raise ConfigurationError(f"Not a valid duration: {pair}")
        amount, unit = res.groups()
        factor = UNIT_FACTORS_MS.get(unit)
        if factor is None:
            raise ConfigurationError(f"Not a valid duration unit: {unit}")
        total += int(amount) * factor
    return total
