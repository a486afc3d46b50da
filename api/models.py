from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, constr
from datetime import datetime
from typing import Optional
from db.models.site import as_utc


class SiteCreate(BaseModel):
    url: constr(min_length=1, max_length=2048, strip_whitespace=True)  # type: ignore

    @field_validator("url")
    @classmethod
    def reject_inner_whitespace(cls, url):
        if any(ch.isspace() for ch in url):
            raise ValueError("URL must not contain whitespace")
        return url


class SiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    status: str
    last_checked: Optional[datetime]
    last_status_change: Optional[datetime]
    last_down_timestamp: Optional[datetime]

    @field_validator("last_checked", "last_status_change", "last_down_timestamp")
    @classmethod
    def attach_utc(cls, value):
        return as_utc(value)


class ChangeFeedResponse(BaseModel):
    revision: int


class AdminSettingsResponse(BaseModel):
    admin_email: Optional[str]
    password_configured: bool


class AdminSettingsUpdate(BaseModel):
    admin_email: EmailStr
    # Leave empty to keep the stored password
    admin_password: Optional[constr(min_length=1, max_length=200)] = None  # type: ignore


class SmtpTestRequest(BaseModel):
    email: EmailStr
    password: constr(min_length=1, max_length=200)  # type: ignore


class SmtpTestResponse(BaseModel):
    success: bool
    message: str
