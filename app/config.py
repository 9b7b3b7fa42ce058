from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    OMDB_API_KEY: str = ''
    OMDB_DATA_ENDPOINT: str = 'http://www.omdbapi.com/'
    OMDB_IMAGE_ENDPOINT: str = 'http://img.omdbapi.com/'
    OMDB_TIMEOUT: float = 30.0
    LOG_LEVEL: str = 'INFO'

    model_config = ConfigDict(
        env_file=".env"
    )


settings = Settings()
