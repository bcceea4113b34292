"""Space create-or-update handler.

The namespace service owns create-vs-update and version checks; this module
only decodes, delegates and reads back.
"""

from __future__ import annotations

from typing import Any, Dict

from ..backends.base import NamespaceService
from ..data.models import Space


def put_space(namespace: NamespaceService, space_name: str, payload: Dict[str, Any]) -> Space:
    """Write a space under space_name and return the stored copy.

    Raises:
        ValueError: If the payload is not a valid space.
        NamespaceWriteError: If the namespace service rejects the write.
        UserLookupError: If the owning user is unknown.
    """
    requested = Space.from_dict(payload)
    namespace.add_or_update_space(space_name, requested)

    stored = namespace.get_space(space_name)
    stored.dataset_count = namespace.get_dataset_count(space_name)
    return stored
