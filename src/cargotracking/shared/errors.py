"""Typed failures for references that do not resolve and unreachable collaborators.

Shape and invariant violations are reported with protean's ValidationError.
The errors here mean that an input referred to something the system does not
know about, or that an external collaborator could not answer.
"""


class UnknownIdentityError(Exception):
    """An identifier did not resolve to a known domain object."""

    kind = "identity"

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Unknown {self.kind}: {identity}")


class UnknownCargoError(UnknownIdentityError):
    kind = "cargo"


class UnknownLocationError(UnknownIdentityError):
    kind = "location"


class UnknownVoyageError(UnknownIdentityError):
    kind = "voyage"


class RoutingServiceUnavailableError(Exception):
    """The routing collaborator failed to produce route candidates."""
