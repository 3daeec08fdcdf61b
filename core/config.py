# core/config.py

"""
Engine-wide constants and the `EngineConfig` settings object.

The sequence-to-term mapping is fixed and not configurable. The passing mark, scale,
debounce delay, and default coefficient can be overridden per `ClassRegister` by passing
a custom `EngineConfig`.
"""

from dataclasses import dataclass

# all averages are normalized onto a 0-20 scale
SCALE: float = 20.0

PASSING_MARK: float = 10.0

DEFAULT_DEBOUNCE_MS: int = 500

DEFAULT_COEFFICIENT: float = 1.0

# empty string marks a score that has not been entered yet, distinct from zero
EMPTY_MARK: str = ""

LOG_LEVEL_ENV_VAR: str = "TERMBOOK_LOG_LEVEL"


@dataclass(frozen=True)
class EngineConfig:
    """
    Settings for a `ClassRegister` session.

    Attributes:
        passing_mark: Threshold on the 0-20 scale at or above which a student passes.
        scale: Upper bound of the normalized average scale.
        debounce_ms: Delay before a buffered mark or comment edit is written.
        default_coefficient: Coefficient used for subjects without one.
    """

    passing_mark: float = PASSING_MARK
    scale: float = SCALE
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    default_coefficient: float = DEFAULT_COEFFICIENT
