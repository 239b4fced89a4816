from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    firebase_api_key: str = os.getenv("FIREBASE_API_KEY", "")
    firebase_database_url: str = os.getenv("FIREBASE_DATABASE_URL", "")
    firebase_project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")
    firebase_timeout_seconds: float = float(os.getenv("FIREBASE_TIMEOUT_SECONDS", "30"))

    rtdb_sensor_path: str = os.getenv("RTDB_SENSOR_PATH", "Sensor")
    firestore_collection: str = os.getenv("FIRESTORE_COLLECTION", "history")

    # "standard" (12V/5V rails) or "temperature" (3-pump/24h lines + water temperature)
    device_profile: str = os.getenv("DEVICE_PROFILE", "standard")
    display_timezone: str = os.getenv("DISPLAY_TIMEZONE", "Asia/Jakarta")

    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")

    simulator_enabled: bool = os.getenv("SIMULATOR_ENABLED", "false").lower() == "true"
    simulator_rtdb_interval_seconds: int = int(os.getenv("SIMULATOR_RTDB_INTERVAL_SECONDS", "1"))
    simulator_firestore_interval_seconds: int = int(os.getenv("SIMULATOR_FIRESTORE_INTERVAL_SECONDS", "1800"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def firebase_configured(self) -> bool:
        return bool(self.firebase_api_key and self.firebase_database_url and self.firebase_project_id)

    @property
    def cors_origin_list(self) -> list:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

def get_settings() -> Settings:
    """Build settings from the current environment (injected with Depends)"""
    return Settings()
