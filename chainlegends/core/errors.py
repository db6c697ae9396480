"""Exception hierarchy for the battle core.

The core performs no I/O, so every error raised here signals a caller bug or a
broken configuration file rather than a transient runtime condition.
"""


class BattleError(Exception):
    """Base class for all battle core errors."""


class BattleContractError(BattleError, ValueError):
    """Raised when a caller violates the resolver contract.

    Examples are advancing a completed battle, passing health outside
    ``[0, max_health]`` or an unrecognized action. Raised before any state
    is modified.
    """


class RulesConfigError(BattleError):
    """Raised when a battle rules configuration file cannot be used."""
