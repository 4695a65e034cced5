import os
from datetime import timedelta


def _env_bool(name, default="False"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    # Secret key for sessions / JWT
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")

    # Database connection
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///pocketbook.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", 60)))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("JWT_REFRESH_DAYS", 30)))

    # Flask Configuration
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    FLASK_DEBUG = _env_bool("FLASK_DEBUG")
    JSON_SORT_KEYS = False
    API_PREFIX = "/api"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")

    # "Today" for budgets and daily spending is taken in this zone
    APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "Asia/Singapore")

    # View cache (page revalidation)
    CACHE_TYPE = os.environ.get("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get("CACHE_DEFAULT_TIMEOUT", 300))

    # Page composer thread pool
    COMPOSER_MAX_WORKERS = int(os.environ.get("COMPOSER_MAX_WORKERS", 6))

    # Embeddings: "voyage", "openai" or "hashing"; empty means detect from keys
    EMBEDDINGS_PROVIDER = os.environ.get("EMBEDDINGS_PROVIDER", "")
    EMBEDDINGS_MODEL = os.environ.get("EMBEDDINGS_MODEL")
    VOYAGE_API_KEY = os.environ.get("VOYAGE_API_KEY")
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
    EMBEDDINGS_TIMEOUT = int(os.environ.get("EMBEDDINGS_TIMEOUT", 30))


class DevelopmentConfig(Config):
    FLASK_ENV = "development"
    FLASK_DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SECRET_KEY = "test-secret"
    CACHE_TYPE = "SimpleCache"
    EMBEDDINGS_PROVIDER = "hashing"
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    @classmethod
    def validate(cls):
        if not os.environ.get("SECRET_KEY"):
            raise ValueError("SECRET_KEY environment variable must be set")
        if not os.environ.get("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable must be set")
