from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  log_level: str = Field(
    default="WARNING",
    description="Minimum level for structured log events",
  )
  show_banner: bool = Field(
    default=True,
    description="Print the IN FILE MODE / IN INTERACTIVE MODE banner",
  )

  model_config = SettingsConfigDict(
    env_prefix="SIMPLE_DB_",
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
  )


settings = Settings()
