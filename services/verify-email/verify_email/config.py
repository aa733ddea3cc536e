"""
Function configuration.

Unlike the long-running API, settings are read once per invocation: the
handler builds a fresh Settings() for every request.
"""
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from verify_email.errors import Misconfigured


class Settings(BaseSettings):
    # ── Backend (hosted database REST interface) ───────────────────────────
    supabase_url: str
    supabase_service_role_key: str
    profiles_table: str = "profiles"
    request_timeout: float = 10.0

    # Used for the verification link when the request carries no Origin
    site_url: Optional[str] = None

    service_name: str = "verify-email"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        # Only field names and error types: the raw error echoes every input value
        problems = ", ".join(
            f"{'.'.join(str(p) for p in err['loc']).upper()} ({err['type']})"
            for err in exc.errors()
        )
        raise Misconfigured(problems) from None
