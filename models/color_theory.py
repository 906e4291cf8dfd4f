"""Color harmony helpers working on hex colors via the HSL wheel."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, List, NamedTuple, Sequence

logger = logging.getLogger(__name__)

NEUTRAL_SATURATION = 15
NEUTRAL_DARK = 15
NEUTRAL_LIGHT = 90

# Hue family boundaries in degrees, upper bound exclusive.
_HUE_FAMILIES: List[tuple] = [
    (15, "red"),
    (40, "orange"),
    (65, "yellow"),
    (90, "lime"),
    (150, "green"),
    (185, "teal"),
    (200, "cyan"),
    (250, "blue"),
    (275, "indigo"),
    (300, "purple"),
    (335, "pink"),
    (361, "red"),
]

SINGLE_COLOR_HARMONY = 0.85


class HSL(NamedTuple):
    h: int
    s: int
    l: int  # noqa: E741


@dataclass(frozen=True)
class HarmonyResult:
    """Represents the outcome of an outfit-level harmony evaluation."""

    score: float
    mean_pair: float
    worst_pair: float
    families: List[str]
    rule_used: str


def hex_to_hsl(hex_color: str) -> HSL:
    """Convert ``#RRGGBB`` to integer HSL (degrees, percent, percent)."""

    value = hex_color.lstrip("#")
    r = int(value[0:2], 16) / 255
    g = int(value[2:4], 16) / 255
    b = int(value[4:6], 16) / 255
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2
    if high == low:
        return HSL(0, 0, round(lightness * 100))

    delta = high - low
    saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
    if high == r:
        hue = ((g - b) / delta + (6 if g < b else 0)) / 6
    elif high == g:
        hue = ((b - r) / delta + 2) / 6
    else:
        hue = ((r - g) / delta + 4) / 6
    return HSL(round(hue * 360), round(saturation * 100), round(lightness * 100))


def is_neutral(hex_color: str) -> bool:
    """Greys, near-blacks and near-whites pair with anything."""

    hsl = hex_to_hsl(hex_color)
    return hsl.s < NEUTRAL_SATURATION or hsl.l < NEUTRAL_DARK or hsl.l > NEUTRAL_LIGHT


def color_family(hex_color: str) -> str:
    """Classify a color as ``neutral`` or one of the hue families."""

    if is_neutral(hex_color):
        return "neutral"
    hue = hex_to_hsl(hex_color).h
    for upper, family in _HUE_FAMILIES:
        if hue < upper:
            return family
    return "red"


def hue_distance(hex1: str, hex2: str) -> int:
    h1, h2 = hex_to_hsl(hex1).h, hex_to_hsl(hex2).h
    diff = abs(h1 - h2)
    return min(diff, 360 - diff)


def complementary(hex1: str, hex2: str) -> bool:
    """Return True when two chromatic colors sit roughly opposite on the wheel."""

    if is_neutral(hex1) or is_neutral(hex2):
        return False
    result = 150 <= hue_distance(hex1, hex2) <= 210
    logger.debug("complementary check (%s, %s) -> %s", hex1, hex2, result)
    return result


def analogous(hex1: str, hex2: str) -> bool:
    """Return True when two chromatic colors are neighbours on the wheel."""

    if is_neutral(hex1) or is_neutral(hex2):
        return False
    return hue_distance(hex1, hex2) < 30


def pair_harmony(hex1: str, hex2: str) -> float:
    """Score how well two colors work together, in [0, 1].

    Symmetric in its arguments: every term depends only on absolute
    differences between the two colors.
    """

    neutral1 = is_neutral(hex1)
    neutral2 = is_neutral(hex2)
    if neutral1 and neutral2:
        return 0.9
    if neutral1 or neutral2:
        return 0.85

    c1 = hex_to_hsl(hex1)
    c2 = hex_to_hsl(hex2)
    hue_diff = min(abs(c1.h - c2.h), 360 - abs(c1.h - c2.h))
    sat_diff = abs(c1.s - c2.s)
    light_diff = abs(c1.l - c2.l)

    sat_bonus = 0.05 if sat_diff < 20 else 0.02 if sat_diff < 40 else 0.0
    light_bonus = 0.05 if 15 < light_diff < 50 else 0.0

    if hue_diff < 10:
        base = 0.88 if light_diff > 15 else 0.72
    elif hue_diff < 30:
        base = 0.85
    elif hue_diff < 60:
        base = 0.75
    elif 120 < hue_diff < 150:
        base = 0.78
    elif 110 < hue_diff <= 130:
        base = 0.73
    elif 150 <= hue_diff <= 210:
        base = 0.9
    elif 80 < hue_diff <= 100:
        base = 0.65
    else:
        base = 0.4
    return min(1.0, base + sat_bonus + light_bonus)


def monochrome(colors: Iterable[str]) -> bool:
    """Return True when all chromatic colors share one family."""

    families = {color_family(color) for color in colors} - {"neutral"}
    return len(families) <= 1


def evaluate_harmony(colors: Sequence[str], worst_pair_weight: float = 0.4) -> HarmonyResult:
    """Blend mean pairwise harmony with the worst pair.

    A pure average lets one clashing pair disappear among harmonious ones, so
    ``worst_pair_weight`` of the result comes from the lowest pair score.
    """

    families = [color_family(color) for color in colors]
    pair_scores = [pair_harmony(a, b) for a, b in combinations(colors, 2)]
    if not pair_scores:
        return HarmonyResult(
            score=SINGLE_COLOR_HARMONY,
            mean_pair=SINGLE_COLOR_HARMONY,
            worst_pair=SINGLE_COLOR_HARMONY,
            families=families,
            rule_used="single",
        )

    mean_pair = sum(pair_scores) / len(pair_scores)
    worst_pair = min(pair_scores)
    score = mean_pair * (1 - worst_pair_weight) + worst_pair * worst_pair_weight

    chromatic = [color for color, family in zip(colors, families) if family != "neutral"]
    if not chromatic:
        rule_used = "neutral"
    elif monochrome(chromatic):
        rule_used = "monochrome"
    elif any(complementary(a, b) for a, b in combinations(chromatic, 2)):
        rule_used = "complementary"
    elif all(analogous(a, b) for a, b in combinations(chromatic, 2)):
        rule_used = "analogous"
    else:
        rule_used = "mixed"
    logger.debug("harmony %s -> score=%.3f rule=%s", list(colors), score, rule_used)
    return HarmonyResult(
        score=round(score, 6),
        mean_pair=round(mean_pair, 6),
        worst_pair=round(worst_pair, 6),
        families=families,
        rule_used=rule_used,
    )


__all__ = [
    "HSL",
    "HarmonyResult",
    "hex_to_hsl",
    "is_neutral",
    "color_family",
    "hue_distance",
    "complementary",
    "analogous",
    "pair_harmony",
    "monochrome",
    "evaluate_harmony",
]
