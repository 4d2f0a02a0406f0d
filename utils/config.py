import os
from dotenv import load_dotenv
from pydantic import BaseModel


DEFAULT_COMPLETION_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_COMPLETION_MODEL = "openai/gpt-4o-mini"


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "intelliq"

    completion_api_key: str | None = None
    completion_base_url: str = DEFAULT_COMPLETION_BASE_URL
    completion_model: str = DEFAULT_COMPLETION_MODEL
    title_timeout: float = 60.0
    quiz_timeout: float = 180.0

    upload_dir: str = "uploads"
    cors_origins: list[str] = ["https://intelliq.onrender.com"]
    logging_level: str = "INFO"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment, reading .env first."""
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS")
        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("MONGO_DB_NAME", "intelliq"),
            completion_api_key=os.getenv("OPENROUTER_API_KEY"),
            completion_base_url=os.getenv("COMPLETION_BASE_URL", DEFAULT_COMPLETION_BASE_URL),
            completion_model=os.getenv("COMPLETION_MODEL", DEFAULT_COMPLETION_MODEL),
            title_timeout=float(os.getenv("TITLE_TIMEOUT_SECONDS", 60)),
            quiz_timeout=float(os.getenv("QUIZ_TIMEOUT_SECONDS", 180)),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else ["https://intelliq.onrender.com"],
            logging_level=os.getenv("LOGGING_LEVEL", "INFO").upper(),
            port=int(os.getenv("PORT", 5000)),
        )
