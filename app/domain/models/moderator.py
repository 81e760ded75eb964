from typing import Any

from app.domain.models.product import StoredDocument

ROLES: tuple[str, ...] = ("admin", "moderator")

class Moderator(StoredDocument):
    uid: Any = None
    display_name: Any = None
    email: Any = None
    role: Any = None
    image: Any = None
