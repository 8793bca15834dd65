from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

KeyRole = Literal["anon", "service"]


class Settings(BaseSettings):
    # Server
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Supabase
    supabase_url: str = Field(
        "",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL"),
    )
    supabase_anon_key: str = Field(
        "",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"),
    )
    supabase_publishable_key: str = Field(
        "",
        validation_alias=AliasChoices(
            "SUPABASE_PUBLISHABLE_KEY", "VITE_SUPABASE_PUBLISHABLE_KEY"
        ),
    )
    supabase_service_role_key: str = Field(
        "",
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_ROLE_KEY", "VITE_SUPABASE_SERVICE_ROLE_KEY"
        ),
    )
    supabase_jwt_secret: str = Field(
        "",
        validation_alias=AliasChoices("SUPABASE_JWT_SECRET"),
    )

    # Name of the generic SQL execution function exposed over RPC
    exec_sql_function: str = "exec_sql"

    def key_for(self, role: KeyRole) -> str:
        """Return the API key used for a client role ("" when not configured)."""
        if role == "service":
            return self.supabase_service_role_key
        return self.supabase_anon_key or self.supabase_publishable_key

    def missing_for(self, role: KeyRole) -> list[str]:
        """Names of the variables that must be set before a client of this role can be built."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.key_for(role):
            if role == "service":
                missing.append("SUPABASE_SERVICE_ROLE_KEY")
            else:
                missing.append("SUPABASE_ANON_KEY (or SUPABASE_PUBLISHABLE_KEY)")
        return missing

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
