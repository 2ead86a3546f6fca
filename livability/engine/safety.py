"""Safety score derived from reported crime counts.

Starts at 10 and subtracts up to 5 for crime volume (one point per 100
incidents) and up to 3 for the violent share, floored at 1.
"""


def violent_crime_rate(total_crimes: int, violent_crimes: int) -> float:
    """Violent share of all crimes; 0 when no crimes are recorded."""
    if total_crimes == 0:
        return 0.0
    return violent_crimes / total_crimes


def derive_safety_score(total_crimes: int, violent_crimes: int) -> float:
    if total_crimes < 0 or violent_crimes < 0:
        raise ValueError("crime counts must be non-negative")
    if violent_crimes > total_crimes:
        raise ValueError(f"violent crimes ({violent_crimes}) exceed total ({total_crimes})")

    volume_penalty = min(total_crimes / 100, 5)
    violence_penalty = violent_crime_rate(total_crimes, violent_crimes) * 3
    return max(1.0, 10 - (volume_penalty + violence_penalty))
