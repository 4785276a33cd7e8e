import json
import logging
import os
from dataclasses import dataclass

import boto3

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_LOG_LEVEL = "INFO"

_secrets_client = None
_secret_cache = {}


class ConfigError(RuntimeError):
    pass


def _secrets():
    global _secrets_client
    if _secrets_client is None:
        _secrets_client = boto3.client("secretsmanager")
    return _secrets_client


def _env(name: str, default: str = "") -> str:
    v = os.environ.get(name)
    return default if v is None else v.strip()


def _log_level(raw: str) -> str:
    level = raw.upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Settings:
    sheet_id: str
    client_email: str = ""
    private_key: str = ""
    credentials_secret_id: str = ""
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_env():
        # Keys pasted into env vars usually carry escaped newlines.
        private_key = os.environ.get("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")
        return Settings(
            sheet_id=_env("SHEET_ID"),
            client_email=_env("GOOGLE_CLIENT_EMAIL"),
            private_key=private_key,
            credentials_secret_id=_env("GOOGLE_CREDENTIALS_SECRET_ID"),
            log_level=_log_level(_env("LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )

    def require_sheet_id(self) -> str:
        if not self.sheet_id:
            raise ConfigError("SHEET_ID is not configured")
        return self.sheet_id

    def credentials_info(self):
        if self.credentials_secret_id:
            info = _load_secret(self.credentials_secret_id)
        else:
            info = {"client_email": self.client_email, "private_key": self.private_key}

        if not info.get("client_email") or not info.get("private_key"):
            raise ConfigError("Google service account credentials are not configured")
        info.setdefault("token_uri", TOKEN_URI)
        return info


def _load_secret(secret_id: str):
    # Warm containers reuse the secret instead of fetching it per request.
    if secret_id in _secret_cache:
        return dict(_secret_cache[secret_id])

    logger.debug("loading service account from secret %s", secret_id)
    resp = _secrets().get_secret_value(SecretId=secret_id)
    raw = resp.get("SecretString") or ""
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ConfigError(f"secret {secret_id} is not valid JSON") from e
    if not isinstance(payload, dict):
        raise ConfigError(f"secret {secret_id} must hold a JSON object")

    info = dict(payload)
    info["private_key"] = str(info.get("private_key", "")).replace("\\n", "\n")
    _secret_cache[secret_id] = info
    return dict(info)
