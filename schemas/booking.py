import datetime as dt
from typing import Annotated, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Hour = Annotated[int, Field(ge=0, le=23)]


class AddonSelection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(min_length=1)
    # range is checked against the studio's max_quantity by the booking engine
    quantity: int


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    studio: int
    date: dt.date
    hours: List[Hour] = Field(min_length=1)
    package_key: str = Field(alias="packageKey", min_length=1)
    addons: List[AddonSelection] = Field(default_factory=list)
    payment_status: Literal["paid", "payAtStudio"] = Field(default="payAtStudio", alias="paymentStatus")

    @field_validator("hours")
    @classmethod
    def _distinct_hours(cls, value):
        if len(set(value)) != len(value):
            raise ValueError("hours must not contain duplicates")
        return sorted(value)

    @field_validator("addons")
    @classmethod
    def _distinct_addons(cls, value):
        keys = [a.key for a in value]
        if len(set(keys)) != len(keys):
            raise ValueError("each add-on may only be listed once")
        return value
