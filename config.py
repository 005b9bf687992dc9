import os
from typing import Optional

import yaml
import keyring

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save settings to a YAML file with optional encryption."""

    SENSITIVE_KEYS = {
        "api_key",
    }

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path
        self.encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"
        self.service = "fitwithfaisal"

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if self.encrypt:
            for key in list(data.keys()):
                if key in self.SENSITIVE_KEYS:
                    secret = keyring.get_password(self.service, key)
                    if secret is not None:
                        data[key] = secret
                    else:
                        data.pop(key, None)
        return data

    def save(self, data: dict) -> None:
        out = dict(data)
        if self.encrypt:
            for key in self.SENSITIVE_KEYS:
                if key in out:
                    keyring.set_password(self.service, key, str(out[key]))
                    out[key] = True
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)


def load_settings(path: Optional[str] = None) -> SettingsSchema:
    """Read settings from YAML, then apply environment overrides."""
    path = path or os.environ.get("YAML_PATH", "settings.yaml")
    data = YamlConfig(path).load()
    api_key = os.environ.get("API_KEY") or os.environ.get("GEMINI_API_KEY")
    if api_key:
        data["api_key"] = api_key
    if os.environ.get("LOG_LEVEL"):
        data["log_level"] = os.environ["LOG_LEVEL"]
    return validate_settings(data)
