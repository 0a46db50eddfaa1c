from pydantic import BaseModel
import os

DEFAULT_SECRET_KEY = "change-me-in-production"

CATEGORIES = ['pothole', 'streetlight', 'water_supply', 'garbage', 'public_transport', 'other']
ALLOWED_IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif']
MAX_IMAGE_SIZE = 5 * 1024 * 1024

DEFAULT_PAGE_LIMIT = 50
DEFAULT_PAGE_OFFSET = 0

# largest value an INTEGER column or LIMIT/OFFSET accepts
MAX_DB_INT = 2**63 - 1


class Settings(BaseModel):
    """
    Process configuration, built once at startup and passed explicitly
    to whatever needs it (session ledger, photo storage, database engine).
    """

    database_url: str = "sqlite:///./janmitra.db"
    frontend_url: str = "http://localhost:3000"
    is_production: bool = False

    image_dir: str = "janmitra/media/uploads/"
    image_url: str = "/uploads/"

    session_expire_time: int = 24 * 60 # in minutes

    ### Hashing
    secret_key: str = DEFAULT_SECRET_KEY # if you don't have one, you can generate one using `openssl rand -hex 32` in cmd
    encryption_algorithm: str = "HS256"

    @property
    def cors_origins(self) -> list[str]:
        return [self.frontend_url]

    @classmethod
    def from_env(cls) -> "Settings":
        is_production = os.environ.get("PRODUCTION", "").lower() in ("1", "true", "yes")
        secret_key = os.environ.get("SECRET_KEY")

        if is_production and not secret_key:
            raise RuntimeError("SECRET_KEY must be set when PRODUCTION is enabled")

        values = {
            "is_production": is_production,
            "secret_key": secret_key or DEFAULT_SECRET_KEY,
        }
        for field, variable in (
            ("database_url", "DATABASE_URL"),
            ("frontend_url", "FRONTEND_URL"),
            ("image_dir", "IMAGE_DIR"),
            ("session_expire_time", "SESSION_EXPIRE_TIME"),
        ):
            if (value := os.environ.get(variable)) is not None:
                values[field] = value

        return cls(**values)
