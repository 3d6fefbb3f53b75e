from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _EmailBody(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    email: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value):
        value = value.strip().lower()
        if "@" not in value or len(value) > 255:
            raise ValueError("invalid email")
        return value


class SignupRequest(_EmailBody):
    name: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1)
    user_type: Literal["customer", "owner"] = Field(alias="userType")
    phone: Optional[str] = Field(default=None, max_length=30)


class VerifyOtpRequest(_EmailBody):
    email_otp: str = Field(alias="emailOtp", min_length=1)
    phone_otp: Optional[str] = Field(default=None, alias="phoneOtp")


class LoginRequest(_EmailBody):
    password: str
