"""Composable boolean specifications.

A specification is a predicate over a subject type. Specifications combine
with AND, OR and NOT into new specifications; evaluation has no side effects.

    on_time = PredicateSpecification(lambda itinerary: itinerary.final_arrival_time <= deadline)
    to_stockholm = PredicateSpecification(lambda itinerary: itinerary.final_arrival_location == "SESTO")

    (on_time & to_stockholm).is_satisfied_by(itinerary)

The variants form a closed set: PredicateSpecification (atomic), And, Or, Not.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class Specification(ABC, Generic[T]):
    """A predicate over subjects of type T."""

    @abstractmethod
    def is_satisfied_by(self, subject: T) -> bool: ...

    def and_(self, other: "Specification[T]") -> "Specification[T]":
        return AndSpecification(self, other)

    def or_(self, other: "Specification[T]") -> "Specification[T]":
        return OrSpecification(self, other)

    def not_(self) -> "Specification[T]":
        return NotSpecification(self)

    def __and__(self, other: "Specification[T]") -> "Specification[T]":
        return self.and_(other)

    def __or__(self, other: "Specification[T]") -> "Specification[T]":
        return self.or_(other)

    def __invert__(self) -> "Specification[T]":
        return self.not_()


@dataclass(frozen=True)
class PredicateSpecification(Specification[T]):
    """Atomic specification wrapping a total predicate function."""

    predicate: Callable[[T], bool]
    name: str = ""

    def is_satisfied_by(self, subject: T) -> bool:
        return bool(self.predicate(subject))


@dataclass(frozen=True)
class AndSpecification(Specification[T]):
    left: Specification[T]
    right: Specification[T]

    def is_satisfied_by(self, subject: T) -> bool:
        return self.left.is_satisfied_by(subject) and self.right.is_satisfied_by(subject)


@dataclass(frozen=True)
class OrSpecification(Specification[T]):
    left: Specification[T]
    right: Specification[T]

    def is_satisfied_by(self, subject: T) -> bool:
        return self.left.is_satisfied_by(subject) or self.right.is_satisfied_by(subject)


@dataclass(frozen=True)
class NotSpecification(Specification[T]):
    wrapped: Specification[T]

    def is_satisfied_by(self, subject: T) -> bool:
        return not self.wrapped.is_satisfied_by(subject)

