"""User Schemas — request bodies for the user endpoints.

Invariants:
    - JSON field names are camelCase (alias generator); Python attributes snake_case
    - Only structural checks here; format rules run in core/validation.py inside
      the repository, so non-HTTP callers get the same checks
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(CamelModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str
    password: str
    profile_picture_location: str = ""
    role: str = "user"


class UserLogin(CamelModel):
    email: str
    password: str


class ReservationEntry(CamelModel):
    drink_id: str
    timestamp: str


class UserUpdate(CamelModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str
    password: str
    review_ids: list[str] = Field(default_factory=list)
    profile_picture_location: str = ""
    drink_reserved: list[ReservationEntry] = Field(default_factory=list)
    role: str = "user"


class ReservationCreate(CamelModel):
    drink_id: str
