from pathlib import Path
from typing import Dict, List, Optional

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from artifactbot.errors import ConfigurationError

DEFAULT_BUILD_NUMBER = "lastSuccessfulBuild"
DEFAULT_ARTIFACT_NAME = "archive.zip"
MAX_BUILD_NUMBER = 2**31 - 1

# Aliases Jenkins understands out of the box; anything else is passed through.
SPECIAL_BUILD_NUMBERS = (
    "lastSuccessfulBuild",
    "lastStableBuild",
    "lastBuild",
    "lastCompletedBuild",
)


class JenkinsBuild(BaseModel):
    number: int
    result: Optional[str] = None
    url: Optional[str] = None


class ConnectionInfo(BaseModel):
    server_url: AnyHttpUrl
    user_name: Optional[str] = None
    token: Optional[str] = None
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        return str(self.server_url).rstrip("/")

    @property
    def auth(self) -> Optional[tuple]:
        if self.user_name and self.token:
            return (self.user_name, self.token)
        return None


class OperationConfig(BaseModel):
    """Inputs of a single artifact import.

    Required fields are checked when the operation runs rather than here, so
    a half-filled config can still be built and described.
    """

    job_name: str = Field(
        "", description="Jenkins job name; folders are separated with '/'."
    )
    branch_name: Optional[str] = Field(
        None,
        description="Required for a multi-branch project, otherwise left empty.",
    )
    build_number: str = Field(
        DEFAULT_BUILD_NUMBER,
        description=(
            "A specific build number, or a special value such as "
            + ", ".join(SPECIAL_BUILD_NUMBERS)
            + "."
        ),
    )
    artifact_name: str = Field(
        DEFAULT_ARTIFACT_NAME,
        description="Name of the artifact in the library once captured.",
    )
    output_variable: Optional[str] = Field(
        None, description="Variable receiving the resolved Jenkins build number."
    )

    @field_validator("job_name", "artifact_name", "build_number", mode="before")
    @classmethod
    def _strip(cls, value: object) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("branch_name", "output_variable", mode="before")
    @classmethod
    def _empty_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip() or None

    @property
    def build_token(self) -> str:
        return self.build_number or DEFAULT_BUILD_NUMBER

    @property
    def literal_build_number(self) -> Optional[int]:
        token = self.build_token
        if not (token.isascii() and token.isdigit()):
            return None
        digits = token.lstrip("0") or "0"
        # Jenkins stores build numbers as a Java int.
        if len(digits) > len(str(MAX_BUILD_NUMBER)) or int(digits) > MAX_BUILD_NUMBER:
            raise ConfigurationError(
                "Build number is out of range", field="build_number", value=token
            )
        return int(digits)


class ImportResult(BaseModel):
    job_name: str
    branch_name: Optional[str] = None
    build_number: str
    artifact_name: str
    path: Path
    size: int
    outputs: Dict[str, str] = {}


class BuildList(BaseModel):
    builds: List[JenkinsBuild] = []
