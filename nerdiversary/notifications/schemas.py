from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PushKeys(BaseModel):
    p256dh: str = Field(min_length=1)
    auth: str = Field(min_length=1)


class PushSubscriptionPayload(BaseModel):
    endpoint: str = Field(min_length=1)
    keys: PushKeys

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith("https://") and not v.startswith("http://"):
            raise ValueError("endpoint must be an http(s) URL")
        return v


class FamilyMemberIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    birth_datetime: str = Field(alias="birthDatetime")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class SubscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subscription: PushSubscriptionPayload
    # Either the "Name|YYYY-MM-DD|HH:MM,..." share string or explicit members
    family: Union[str, List[FamilyMemberIn]]
    lead_minutes: Optional[List[int]] = Field(default=None, alias="leadMinutes")


class SubscribeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    subscription_id: str = Field(alias="subscriptionId")
    members: int
    lead_minutes: List[int] = Field(alias="leadMinutes")


class UnsubscribeRequest(BaseModel):
    endpoint: str = Field(min_length=1)


class UnsubscribeResponse(BaseModel):
    success: bool
    removed: bool


class VapidPublicKeyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_key: str = Field(alias="publicKey")
