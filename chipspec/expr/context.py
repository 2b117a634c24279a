"""Feature context against which condition expressions are evaluated."""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable


@dataclass(frozen=True)
class FeatureContext:
    """
    Closed set of enabled build features plus mode switches.

    ``ignore_feature_gates`` is set when producing output that must not
    depend on which features happen to be enabled (e.g. documentation).
    """

    features: FrozenSet[str] = field(default_factory=frozenset)
    ignore_feature_gates: bool = False

    def __post_init__(self):
        if not isinstance(self.features, frozenset):
            object.__setattr__(self, "features", frozenset(self.features))

    @classmethod
    def from_features(
        cls, features: Iterable[str] = (), ignore_feature_gates: bool = False
    ) -> "FeatureContext":
        return cls(frozenset(features), ignore_feature_gates)

    def has_feature(self, name: str) -> bool:
        return name in self.features

    def ignoring_feature_gates(self) -> bool:
        return self.ignore_feature_gates

    def with_features(self, *names: str) -> "FeatureContext":
        """Return a copy with additional features enabled."""
        return FeatureContext(self.features | frozenset(names), self.ignore_feature_gates)

    def __str__(self) -> str:
        flags = sorted(self.features)
        if self.ignore_feature_gates:
            flags.append("<ignore_feature_gates>")
        return "{" + ", ".join(flags) + "}"
