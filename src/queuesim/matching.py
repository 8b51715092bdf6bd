"""
Structural value matching used by argument and batch expectations.

values_match(pattern, value) is true when:
- pattern is a ValueMatcher and its matches(value) is true
- both are lists/tuples of the same length matching element-wise
- both are dicts with the same keys matching value-wise
- otherwise pattern == value (so unittest.mock.ANY works anywhere)
"""

from typing import Any, Callable


class ValueMatcher:
    """Base for composable patterns."""

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def description(self) -> str:
        return repr(self)


def values_match(pattern: Any, value: Any) -> bool:
    if isinstance(pattern, ValueMatcher):
        return bool(pattern.matches(value))

    if isinstance(pattern, (list, tuple)) and isinstance(value, (list, tuple)):
        return len(pattern) == len(value) and all(
            values_match(p, v) for p, v in zip(pattern, value)
        )

    if isinstance(pattern, dict) and isinstance(value, dict):
        return pattern.keys() == value.keys() and all(
            values_match(p, value[k]) for k, p in pattern.items()
        )

    return pattern == value


class HaveAttributes(ValueMatcher):
    """Matches objects whose attributes match the given patterns."""

    _missing = object()

    def __init__(self, **attributes):
        self.attributes = attributes

    def matches(self, value: Any) -> bool:
        for name, pattern in self.attributes.items():
            actual = getattr(value, name, self._missing)
            if actual is self._missing or not values_match(pattern, actual):
                return False
        return True

    def description(self) -> str:
        rendered = ", ".join(f"{name}={pattern!r}" for name, pattern in self.attributes.items())
        return f"have attributes ({rendered})"

    def __repr__(self) -> str:
        return f"HaveAttributes({self.attributes!r})"


class Satisfies(ValueMatcher):
    """Matches values for which `predicate(value)` is true."""

    def __init__(self, predicate: Callable[[Any], bool], label: str = None):
        self.predicate = predicate
        self.label = label or getattr(predicate, "__name__", "predicate")

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def description(self) -> str:
        return f"satisfy {self.label}"

    def __repr__(self) -> str:
        return f"Satisfies({self.label})"


def have_attributes(**attributes) -> HaveAttributes:
    return HaveAttributes(**attributes)


def satisfies(predicate: Callable[[Any], bool], label: str = None) -> Satisfies:
    return Satisfies(predicate, label)
