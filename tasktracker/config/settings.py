import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    """
    Application configuration settings.
    Loads from environment variables with defaults.
    """
    PROJECT_NAME: str = "Team Task Tracker API"
    PROJECT_VERSION: str = "1.0.0"

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tasktracker.db")

    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Single-team deployments address this team when no team is given
    DEFAULT_TEAM_ID: str = os.getenv("DEFAULT_TEAM_ID", "92e8f38d-5161-4d70-bbdd-772d23cc7373")

    # Flat rate, no per-member rates
    HOURLY_RATE: float = float(os.getenv("HOURLY_RATE", "50"))
    ACTIVE_WINDOW_DAYS: int = int(os.getenv("ACTIVE_WINDOW_DAYS", "30"))
    ACTIVITY_FEED_LIMIT: int = 20

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    ALLOWED_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

settings = Settings()
