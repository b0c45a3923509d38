"""Advisory severity levels and their ordering.

yarn reports severities as lowercase names. The five levels are totally
ordered by increasing impact, which is what the threshold checks rely on.

Provides:
- Severity: Ordered enum of advisory severity levels
- parse_severity: Case-insensitive name lookup that raises ConfigError
- severity_names: Level names in ascending order (for CLI choices)
"""

from enum import Enum

from auditgate.core.errors import ConfigError


class Severity(str, Enum):
    """Severity of a yarn advisory.

    Members compare by impact rather than alphabetically:

        >>> Severity.MODERATE < Severity.HIGH
        True
    """

    INFO = "info"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position in the ordering, 0 for info up to 4 for critical."""
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {severity: index for index, severity in enumerate(Severity)}


def severity_names() -> list[str]:
    return [severity.value for severity in Severity]


def parse_severity(name: str) -> Severity:
    """Resolve a severity name as given on the command line.

    Args:
        name: Severity name, any case (e.g., "High")

    Returns:
        Matching Severity member

    Raises:
        ConfigError: If the name is not one of the known levels
    """
    try:
        return Severity(name.strip().lower())
    except ValueError:
        raise ConfigError(
            f"Invalid severity level: {name!r} "
            f"(expected one of: {', '.join(severity_names())})"
        ) from None
