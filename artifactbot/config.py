from pathlib import Path

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from artifactbot import schemas


class Settings(BaseSettings):
    TELEGRAM_BOT_TOKEN: str

    JENKINS_URL: AnyHttpUrl
    JENKINS_USER_NAME: str
    JENKINS_USER_TOKEN: str
    JENKINS_TIMEOUT: float = 30.0

    ARTIFACT_LIBRARY_DIR: Path = Path("artifacts")
    ARTIFACT_LIBRARY_UNIQUE: bool = False

    ALLOWED_CHATS: list[int]
    model_config = SettingsConfigDict(env_file=".env")

    def connection_info(self) -> schemas.ConnectionInfo:
        return schemas.ConnectionInfo(
            server_url=self.JENKINS_URL,
            user_name=self.JENKINS_USER_NAME,
            token=self.JENKINS_USER_TOKEN,
            timeout=self.JENKINS_TIMEOUT,
        )


settings = Settings()
