from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Collection:
    """
    A named, prioritized bucket of physical inventory (a Helvault binder).

    Attributes:
        id: Encoded binder identifier (see helvault.identifiers)
        name: Display name of the binder
        description: Optional free-text description
        priority: Allocation order; lower priorities are drawn from first
    """

    id: str
    name: str
    description: str | None = None
    priority: int = 0


def sort_by_priority(collections: list[Collection] | tuple[Collection, ...]) -> list[Collection]:
    """Collections in allocation order. Ties keep their input order."""
    return sorted(collections, key=lambda c: c.priority)
