MIN_SUB_SCORE = 0.01


def clamp(lower: float, upper: float, value: float) -> float:
    """Return the value if it's between the bounds, else the nearest bound."""
    return min(upper, max(lower, value))


def normalise(lower: float, upper: float, value: float) -> float:
    """
    Normalise a value as a score in the range 0 < n <= 1.

    Values closer to the lower bound score higher. The result never drops
    below MIN_SUB_SCORE so a combined score is always positive.
    """
    clamped = clamp(lower, upper, value)
    normalised = (upper - clamped) / (upper - lower)
    return max(normalised, MIN_SUB_SCORE)


def score_run(
    *,
    pace_lower_bound: float,
    pace_upper_bound: float,
    hr_lower_bound: float,
    hr_upper_bound: float,
    average_pace: float,
    average_heart_rate: float,
) -> float:
    """
    Get the score for a run based on its pace and average heart rate.

    Lower pace and lower heart rate give a higher score. Bounds are expected
    to be validated already (upper > lower), see ScoreBounds.

    Args:
        pace_lower_bound (float): Lower bound for pace (mins/km)
        pace_upper_bound (float): Upper bound for pace (mins/km)
        hr_lower_bound (float): Lower bound for heart rate (bpm)
        hr_upper_bound (float): Upper bound for heart rate (bpm)
        average_pace (float): Average pace of the run (mins/km)
        average_heart_rate (float): Average heart rate of the run (bpm)

    Returns:
        float: A score for the run in the range 0 < x <= 1
    """
    pace_score = normalise(pace_lower_bound, pace_upper_bound, average_pace)
    hr_score = normalise(hr_lower_bound, hr_upper_bound, average_heart_rate)
    return pace_score * hr_score
