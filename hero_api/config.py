from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


class Settings(BaseSettings):
    """Runtime settings loaded from env / .env.

    The LLM endpoint and key are optional on purpose: a missing value is
    reported per turn instead of failing at startup.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(default="sqlite:///./homework-hero.db")

    llm_api_url: Optional[str] = Field(default=None, description="LLM gateway endpoint")
    llm_api_key: Optional[str] = Field(default=None, description="LLM gateway API key")
    llm_api_timeout_seconds: float = Field(default=60.0, gt=0)

    prompt_max_length: int = 2000
    response_max_length: int = 4000
    session_id_max_length: int = 100
    student_base_prompt_name: str = "StudentBasePrompt"

    log_level: str = "INFO"
    log_dir: str = "logs"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


engine = create_engine(
    get_settings().database_url,
    connect_args={"check_same_thread": False} if get_settings().database_url.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    create_db()


def create_db():
    # models must be imported so their tables are registered on Base
    import hero_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
