from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    PORT: int
    DATABASE_URL: str
    FIRESTORE_DATABASE_ID: str = "rides"
    CREDENTIALS_PATH: str = "credentials.json"
    ROOT_PATH: str = ""
    LOG_LEVEL: str = "INFO"

    # Miles
    DEFAULT_SEARCH_RADIUS_MILES: float = 30.0
    MAX_SEARCH_DISTANCE_MILES: float = 100.0

    model_config = ConfigDict(env_file='.env')

settings = Settings()
