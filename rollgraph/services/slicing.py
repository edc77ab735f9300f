from typing import Any


def window(
    items: list[Any] | None, first: int | None = None, skip: int | None = None
) -> list[Any] | None:
    """Apply first/skip to a list the Rollbar API returns unpaginated.

    ``skip`` counts from -1: ``skip=1`` starts at index 2. Without ``first``
    everything after index ``skip`` is returned.
    """
    if items is None:
        return None
    if first is None and skip is None:
        return items
    if first is None:
        return items[skip + 1 :]

    # skip=0 counts as unset here, so it behaves like -1
    skip = skip or -1
    return items[skip + 1 : skip + 1 + first]
