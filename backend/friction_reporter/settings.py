from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Database (used when store_backend == "sql")
	database_url: str = Field(default="sqlite:///./friction.db", validation_alias="DATABASE_URL")

	# Store backend can be "sql" (SQLAlchemy) or "rest" (hosted PostgREST / Supabase)
	store_backend: str = Field(default="sql", validation_alias="STORE_BACKEND")
	supabase_url: str | None = Field(default=None, validation_alias="SUPABASE_URL")
	supabase_anon_key: str | None = Field(default=None, validation_alias="SUPABASE_ANON_KEY")
	rest_timeout_seconds: float = Field(default=10.0, validation_alias="REST_TIMEOUT_SECONDS")

	# Institution list re-fetch interval for the dashboard snapshot
	refresh_interval_seconds: float = Field(default=2.0, validation_alias="REFRESH_INTERVAL_SECONDS")
	# Preselected institution on the submission form
	default_institution_name: str = Field(default="Municipal Council", validation_alias="DEFAULT_INSTITUTION_NAME")
	# Insert demo institutions into an empty SQL store at startup
	seed_demo_data: bool = Field(default=True, validation_alias="SEED_DEMO_DATA")

	# Logging
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	log_format: str = Field(default="text", validation_alias="LOG_FORMAT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
