import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Location(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    full_address: Optional[str] = Field(default=None, alias="fullAddress", max_length=255)
    city: Optional[str] = Field(default=None, max_length=80)
    state: Optional[str] = Field(default=None, max_length=80)
    pin_code: Optional[str] = Field(default=None, alias="pinCode", max_length=12)


class OperationalHours(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: int = Field(ge=0, le=23)
    end: int = Field(ge=1, le=24)

    @model_validator(mode="after")
    def _ordered(self):
        if self.start >= self.end:
            raise ValueError("operational start hour must be before end hour")
        return self


class PackageIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(min_length=1, max_length=80)
    price: int = Field(ge=0)
    description: str = Field(default="", max_length=255)


class AddonIn(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    key: str = Field(min_length=1, max_length=80)
    price: int = Field(ge=0)
    description: str = Field(default="", max_length=255)
    max_quantity: int = Field(default=1, ge=1, alias="maxQuantity")


class SlotIn(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    hour: int = Field(ge=0, le=23)
    is_available: bool = Field(default=True, alias="isAvailable")


class AvailabilityDayIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: dt.date
    slots: List[SlotIn] = Field(default_factory=list)


def _unique_keys(items, label):
    keys = [i.key for i in items]
    if len(set(keys)) != len(keys):
        raise ValueError(f"{label} keys must be unique")
    return items


class StudioCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    equipments: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    location: Location = Field(default_factory=Location)
    price_per_hour: int = Field(default=0, ge=0, alias="pricePerHour")
    operational_hours: OperationalHours = Field(alias="operationalHours")
    packages: List[PackageIn] = Field(min_length=1)
    addons: List[AddonIn] = Field(default_factory=list)
    availability: List[AvailabilityDayIn] = Field(default_factory=list)

    @field_validator("packages")
    @classmethod
    def _unique_packages(cls, value):
        return _unique_keys(value, "package")

    @field_validator("addons")
    @classmethod
    def _unique_addons(cls, value):
        return _unique_keys(value, "add-on")


class StudioUpdate(BaseModel):
    """Fields left out are not touched; availability, when given, replaces every day."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    equipments: Optional[List[str]] = None
    images: Optional[List[str]] = None
    location: Optional[Location] = None
    price_per_hour: Optional[int] = Field(default=None, ge=0, alias="pricePerHour")
    operational_hours: Optional[OperationalHours] = Field(default=None, alias="operationalHours")
    packages: Optional[List[PackageIn]] = Field(default=None, min_length=1)
    addons: Optional[List[AddonIn]] = None
    availability: Optional[List[AvailabilityDayIn]] = None

    @field_validator("packages")
    @classmethod
    def _unique_packages(cls, value):
        return _unique_keys(value, "package") if value is not None else value

    @field_validator("addons")
    @classmethod
    def _unique_addons(cls, value):
        return _unique_keys(value, "add-on") if value is not None else value
