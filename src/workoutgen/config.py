from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./workouts.db"
    time_zone: str = "UTC"  # IANA identifier written as workout metadata
    default_start_latitude: str = "50.1234"
    default_start_longitude: str = "8.1234"
    default_lap_length: str = "25"
    default_lap_length_unit: str = "meter"
    authorization_auto_approve: bool = True
    random_seed: Optional[int] = None

    class Config:
        env_prefix = "WORKOUTGEN_"
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
