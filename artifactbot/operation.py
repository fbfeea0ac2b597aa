from contextlib import aclosing
from pathlib import Path
from typing import AsyncGenerator, AsyncIterator, Callable, Optional, Protocol, Tuple

from rich.console import Console

from artifactbot import schemas
from artifactbot.errors import ConfigurationError
from artifactbot.jenkins import JenkinsClient
from artifactbot.library import check_artifact_name

console = Console()


class BuildSource(Protocol):
    async def resolve_build_number(
        self, job_name: str, branch_name: Optional[str], alias: str
    ) -> str: ...

    def download_artifact(
        self,
        job_name: str,
        branch_name: Optional[str],
        build_number: str,
        artifact_name: str,
    ) -> AsyncGenerator[bytes, None]: ...


class ArtifactStore(Protocol):
    async def store(self, name: str, chunks: AsyncIterator[bytes]) -> Tuple[Path, int]: ...


def validate(config: schemas.OperationConfig) -> None:
    if not any(part for part in config.job_name.split("/")):
        raise ConfigurationError("Job name is required", field="job_name", value=config.job_name)
    if not config.artifact_name:
        raise ConfigurationError(
            "Artifact name is required", field="artifact_name", value=config.artifact_name
        )
    check_artifact_name(config.artifact_name)
    if config.literal_build_number == 0:
        raise ConfigurationError(
            "Build numbers start at 1", field="build_number", value=config.build_number
        )


def describe(config: schemas.OperationConfig) -> str:
    """Human readable summary of what an import will do."""
    build = config.build_token
    hash_sign = "#" if config.literal_build_number is not None else ""
    text = f"Import `{config.artifact_name}` of build `{hash_sign}{build}`"
    if config.branch_name:
        text += f" on branch `{config.branch_name}`"
    return text + f" for job `{config.job_name}`"


class ImportArtifactOperation:
    """Downloads an artifact from a Jenkins server into the artifact library."""

    def __init__(
        self,
        library: ArtifactStore,
        client_factory: Callable[[schemas.ConnectionInfo], BuildSource] = JenkinsClient,
    ) -> None:
        self.library = library
        self.client_factory = client_factory

    async def resolve(self, client: BuildSource, config: schemas.OperationConfig) -> str:
        literal = config.literal_build_number
        if literal is not None:
            return str(literal)
        return await client.resolve_build_number(
            config.job_name, config.branch_name, config.build_token
        )

    async def execute(
        self, connection: schemas.ConnectionInfo, config: schemas.OperationConfig
    ) -> schemas.ImportResult:
        validate(config)
        console.print(f"[blue]{describe(config)}[/blue]")

        client = self.client_factory(connection)
        build_number = await self.resolve(client, config)

        download = client.download_artifact(
            config.job_name, config.branch_name, build_number, config.artifact_name
        )
        async with aclosing(download) as chunks:
            path, size = await self.library.store(config.artifact_name, chunks)

        outputs = {}
        if config.output_variable:
            outputs[config.output_variable] = build_number

        console.print(
            f"[green]Imported {config.artifact_name} from build #{build_number} of {config.job_name}[/green]"
        )
        return schemas.ImportResult(
            job_name=config.job_name,
            branch_name=config.branch_name,
            build_number=build_number,
            artifact_name=config.artifact_name,
            path=path,
            size=size,
            outputs=outputs,
        )
