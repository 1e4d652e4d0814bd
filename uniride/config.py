from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./uni-ride.db"
    SECRET_KEY: str = "uni-ride-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRE_HOURS: int = 24
    COOKIE_SECURE: bool = False
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_EMAIL: str = "admin@uni-ride.edu"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()


COLLEGES = [
    "Harvard University",
    "MIT",
    "Stanford University",
    "Yale University",
    "Princeton University",
    "Columbia University",
    "University of Pennsylvania",
    "Cornell University",
    "Dartmouth College",
    "Brown University",
    "University of California, Berkeley",
    "University of California, Los Angeles",
    "University of Michigan",
    "University of Virginia",
    "University of North Carolina",
    "Duke University",
    "New York University",
    "Boston University",
    "Northeastern University",
    "Other",
]
