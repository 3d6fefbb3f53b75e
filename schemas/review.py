from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    studio: int
    rating: int = Field(ge=1, le=5)
    description: str = Field(min_length=1)


class ReviewUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rating: Optional[int] = Field(default=None, ge=1, le=5)
    description: Optional[str] = Field(default=None, min_length=1)
