from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, Field, StrictBool, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from ..core.timeutil import as_utc

UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]


class EventCreate(BaseModel):
    title: StrictStr = Field(min_length=1)
    start: UTCDatetime
    end: UTCDatetime
    all_day: StrictBool = False
    description: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    color: Optional[StrictStr] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class EventPatch(BaseModel):
    """Sparse update: only the fields present in the payload are applied."""

    title: Optional[StrictStr] = Field(default=None, min_length=1)
    start: Optional[UTCDatetime] = None
    end: Optional[UTCDatetime] = None
    all_day: Optional[StrictBool] = None
    description: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    color: Optional[StrictStr] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"

    @field_validator("title", "start", "end", "all_day", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class EventOut(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
