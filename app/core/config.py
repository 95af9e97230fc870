from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://taskmanager:taskmanager@db:5432/taskmanager")
    ENVIRONMENT = getenv("ENVIRONMENT", "development")
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "10080"))  # 7 jours, comme le cookie côté client
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  # 30 jours

    DEFAULT_PAGE_LIMIT = int(getenv("DEFAULT_PAGE_LIMIT", "10"))
    MAX_PAGE_LIMIT = int(getenv("MAX_PAGE_LIMIT", "100"))

    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

settings = Settings()
