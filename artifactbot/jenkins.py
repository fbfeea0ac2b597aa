from typing import AsyncIterator, List, Optional
from urllib.parse import quote

import httpx
from rich.console import Console

from artifactbot import schemas
from artifactbot.errors import JenkinsConnectionError, NotFoundError

console = Console()


def job_path(job_name: str, branch_name: Optional[str] = None) -> str:
    """Build the ``job/...`` path of a job, including folders and branch."""
    parts = [part for part in job_name.split("/") if part]
    if branch_name:
        parts.append(branch_name)
    return "/".join(f"job/{quote(part, safe='')}" for part in parts)


def artifact_path(
    job_name: str, branch_name: Optional[str], build_number: str, artifact_name: str
) -> str:
    return (
        f"{job_path(job_name, branch_name)}/{quote(build_number, safe='')}"
        f"/artifact/*zip*/{quote(artifact_name, safe='')}"
    )


def _check_response(response: httpx.Response, what: str) -> None:
    """Map Jenkins error statuses onto the import error taxonomy."""
    status = response.status_code
    if status in (401, 403):
        raise JenkinsConnectionError(
            f"Jenkins rejected the credentials while fetching {what} (HTTP {status})",
            field="credentials",
            value=str(response.request.url.host),
        )
    if status == 404:
        raise NotFoundError(f"Jenkins has no {what}", field="url", value=str(response.url))
    if status >= 500:
        raise JenkinsConnectionError(
            f"Jenkins failed while fetching {what} (HTTP {status})",
            field="url",
            value=str(response.url),
        )
    response.raise_for_status()


class JenkinsClient:
    """Talks to the Jenkins HTTP API for a single server connection."""

    def __init__(
        self,
        connection: schemas.ConnectionInfo,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.connection = connection
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.connection.base_url,
            auth=self.connection.auth,
            timeout=self.connection.timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    def _unreachable(self, exc: httpx.TransportError) -> JenkinsConnectionError:
        return JenkinsConnectionError(
            f"Could not reach Jenkins: {exc}",
            field="server_url",
            value=self.connection.base_url,
        )

    async def resolve_build_number(
        self, job_name: str, branch_name: Optional[str], alias: str
    ) -> str:
        """Ask Jenkins which build a symbolic alias currently points to."""
        console.print(f"[blue]Resolving {alias} for job: {job_name}[/blue]")
        path = f"{job_path(job_name, branch_name)}/{quote(alias, safe='')}/buildNumber"
        async with self._client() as client:
            try:
                response = await client.get(f"/{path}")
            except httpx.TransportError as e:
                console.print(f"[red]Failed to resolve {alias} for {job_name}: {e}[/red]")
                raise self._unreachable(e) from e
            _check_response(response, f"build {alias} for job {job_name}")
            build_number = response.text.strip()
            if not build_number:
                raise NotFoundError(
                    f"Jenkins returned no build number for job {job_name}",
                    field="build_number",
                    value=alias,
                )
            console.print(f"[green]{alias} of {job_name} is build #{build_number}[/green]")
            return build_number

    async def download_artifact(
        self,
        job_name: str,
        branch_name: Optional[str],
        build_number: str,
        artifact_name: str,
    ) -> AsyncIterator[bytes]:
        """Stream the zipped artifacts of a build."""
        path = artifact_path(job_name, branch_name, build_number, artifact_name)
        console.print(f"[blue]Downloading {path}[/blue]")
        async with self._client() as client:
            try:
                async with client.stream("GET", f"/{path}") as response:
                    _check_response(
                        response, f"artifact {artifact_name} in build #{build_number}"
                    )
                    async for chunk in response.aiter_bytes():
                        yield chunk
            except httpx.TransportError as e:
                console.print(f"[red]Failed to download {path}: {e}[/red]")
                raise self._unreachable(e) from e
        console.print(f"[green]Finished downloading {artifact_name}[/green]")

    async def list_builds(
        self, job_name: str, branch_name: Optional[str] = None, limit: int = 10
    ) -> List[schemas.JenkinsBuild]:
        """Fetch the most recent builds of a job."""
        console.print(f"[blue]Fetching builds for job: {job_name}[/blue]")
        async with self._client() as client:
            try:
                response = await client.get(
                    f"/{job_path(job_name, branch_name)}/api/json",
                    params={"tree": f"builds[number,result,url]{{0,{limit}}}"},
                )
            except httpx.TransportError as e:
                console.print(f"[red]Failed to fetch builds for {job_name}: {e}[/red]")
                raise self._unreachable(e) from e
            _check_response(response, f"job {job_name}")
            builds = schemas.BuildList(**response.json()).builds
            console.print(
                f"[green]Successfully fetched {len(builds)} builds for {job_name}[/green]"
            )
            return builds
