"""Constants and defaults for the typewriter animation."""

class TypewriterConstants:
    """Central defaults for animation options."""

    # Timing (seconds)
    PRE_TYPE_DELAY = 0.07  # One-shot delay before the first character is typed
    TYPE_DELAY = 0.07  # Interval between typed characters
    PRE_ERASE_DELAY = 2.0  # How long a fully typed item stays on screen
    ERASE_DELAY = 0.25  # Interval between erase steps

    # Fade defaults
    FADE_OFFSET = 1
    FADE_KEY = "faded"
    FADE_STRING_KEY_PREFIX = "faded-"

    # Headless playback safety net (virtual seconds)
    HEADLESS_TIME_LIMIT = 3600.0

    # Terminal player
    FRAME_MARGIN = 2  # Columns left of the animated text
    STATUS_MESSAGE = "Ctrl-C to quit"
