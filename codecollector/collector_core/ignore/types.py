"""Value types shared by the ignore modules."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IgnoreRule:
    """A single ignore pattern and where it came from.

    ``source`` is diagnostic only and never takes part in matching.
    """
    pattern: str
    source: str
