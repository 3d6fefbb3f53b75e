from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ContactForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(min_length=1, max_length=5000)


class StudioInquiry(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, max_length=120)
    whatsapp: str = Field(min_length=1, max_length=30)
    location: str = Field(min_length=1, max_length=160)
    has_room: bool = Field(default=False, alias="hasRoom")
    needs_help: bool = Field(default=False, alias="needsHelp")
