from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BeforeValidator


def _to_hex(value):
    return str(value) if isinstance(value, ObjectId) else value


# ObjectId on the way in, 24-char hex string on the way out; any other stored _id is kept as-is
DocumentId = Annotated[Any, BeforeValidator(_to_hex)]


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for `value`, or None if it is not a valid id."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
