from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Gitea Webhook"
    DATABASE_URL: str = "sqlite:///./giteahook.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Name of the source-control host used in comment and description footers
    GITEA_HOST_LABEL: str = "Gitea"
    # Where canonical events go: "local" subscribers or the "celery" queue
    EVENT_SINK: str = "local"

    model_config = {
        "env_file": ".env"
    }


@lru_cache
def get_settings():
    return Settings()


settings = get_settings()
