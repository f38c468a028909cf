"""
Environment-aware configuration.
Secrets and TTLs come from the environment (.env is read when present).
Production has no fallbacks: the secret, database URL, token lifetimes and
hashing costs must all be supplied.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_int(name: str, default: str | None = None) -> int | None:
    raw = os.getenv(name, default)
    return int(raw) if raw else None


def _env_seconds(name: str, default: str | None = None) -> timedelta | None:
    seconds = _env_int(name, default)
    return timedelta(seconds=seconds) if seconds is not None else None


class BaseConfig:
    DEBUG = False
    TESTING = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///shop.db")
    # Token settings
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "shop-auth-api")
    ACCESS_TOKEN_EXPIRES = _env_seconds("ACCESS_TOKEN_EXPIRES_SECONDS", "900")
    REFRESH_TOKEN_EXPIRES = _env_seconds("REFRESH_TOKEN_EXPIRES_SECONDS", "604800")
    # Argon2 work factors
    PASSWORD_HASH_TIME_COST = _env_int("PASSWORD_HASH_TIME_COST", "3")
    PASSWORD_HASH_MEMORY_COST = _env_int("PASSWORD_HASH_MEMORY_COST", "65536")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite:///:memory:"
    JWT_SECRET = "test-secret"
    # Cheap hashes keep the suite fast
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 1024


class ProductionConfig(BaseConfig):
    DEBUG = False
    # No fallbacks: every secret, lifetime and work factor comes from the environment
    JWT_SECRET = os.getenv("JWT_SECRET")
    DATABASE_URL = os.getenv("DATABASE_URL")
    ACCESS_TOKEN_EXPIRES = _env_seconds("ACCESS_TOKEN_EXPIRES_SECONDS")
    REFRESH_TOKEN_EXPIRES = _env_seconds("REFRESH_TOKEN_EXPIRES_SECONDS")
    PASSWORD_HASH_TIME_COST = _env_int("PASSWORD_HASH_TIME_COST")
    PASSWORD_HASH_MEMORY_COST = _env_int("PASSWORD_HASH_MEMORY_COST")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    if name:
        name = name.lower()
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
