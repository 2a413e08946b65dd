"""Theme colors and color utilities for the UI."""


class ThemeColors:
    """Dark teal/gold palette."""

    BG = "#101c22"
    BG_CARD = "#172830"
    BORDER = "#24414b"

    PRIMARY = "#26a69a"
    PRIMARY_LIGHT = "#64d8cb"
    GOLD = "#f6c453"

    TEXT_PRIMARY = "#e6f1f3"
    TEXT_SECONDARY = "#9fb8be"
    TEXT_MUTED = "#5f7a81"

    # Passage characters
    CHAR_CORRECT = "#64d8cb"
    CHAR_CORRECT_BG = "rgba(38, 166, 154, 0.14)"
    CHAR_INCORRECT = "#ef5350"
    CHAR_INCORRECT_BG = "rgba(239, 83, 80, 0.18)"
    CHAR_CURRENT = "#f6c453"
    CHAR_PENDING = "#5f7a81"

    # Rank glyphs
    RANK_GOLD = "#eab308"
    RANK_SILVER = "#9ca3af"
    RANK_BRONZE = "#d97706"

    # WPM badge tiers
    BADGE_HIGH = "#26a69a"
    BADGE_MID = "#2f4f58"
    BADGE_LOW = "transparent"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"


def badge_color(tier: str) -> str:
    """Background for a WPM badge tier ("high", "mid" or "low")."""
    return {
        "high": ThemeColors.BADGE_HIGH,
        "mid": ThemeColors.BADGE_MID,
    }.get(tier, ThemeColors.BADGE_LOW)


def rank_color(rank: int) -> str:
    return {
        1: ThemeColors.RANK_GOLD,
        2: ThemeColors.RANK_SILVER,
        3: ThemeColors.RANK_BRONZE,
    }.get(rank, ThemeColors.TEXT_SECONDARY)
