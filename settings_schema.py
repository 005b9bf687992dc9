from typing import Optional

from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    default_duration: int = Field(default=45, ge=0)
    streak_days: int = Field(default=3, ge=0)
    recent_limit: int = Field(default=3, ge=0)
    weight_unit: str = "lbs"
    log_level: str = "INFO"


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
