from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Spatial data (OpenStreetMap Overpass)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    http_timeout_seconds: float = 15.0

    # Category parsing: raise on unknown school/facility/affordability values
    # instead of mapping them to the neutral default
    strict_categories: bool = False

    # Price simulation
    random_seed: int | None = None
    default_horizon_months: int = 36


settings = Settings()
