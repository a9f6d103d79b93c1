"""
Round timer configuration.
"""


class TimerConfig:
    """
    Configuration class for the round clock.
    Change these values to shorten rounds (tests use a tiny tick).
    """

    # Length of one round
    ROUND_DURATION_S = 60

    # One-time warning when this many seconds remain
    WARNING_THRESHOLD_S = 10

    # Wall-clock length of one tick
    TICK_INTERVAL_S = 1.0

    # Thread name for the tick loop
    THREAD_NAME = "RoundClockThread"
