# api/v1/schemas/moderator.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional

from app.domain.models.moderator import ROLES

class ModeratorIn(BaseModel):
    uid: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    role: Any = None
    image: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def is_complete(self) -> bool:
        return all((self.uid, self.display_name, self.email, self.role))

    def has_valid_role(self) -> bool:
        return self.role in ROLES

class RoleOut(BaseModel):
    # whatever the stored document holds; not re-validated against ROLES
    role: Any = None
