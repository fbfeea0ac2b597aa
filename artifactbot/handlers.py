from typing import List, Optional

from rich.console import Console
from telegram import Chat, Message, Update
from telegram.ext import ContextTypes

from artifactbot import schemas
from artifactbot.config import settings
from artifactbot.errors import ArtifactImportError, ConfigurationError
from artifactbot.jenkins import JenkinsClient
from artifactbot.library import ArtifactLibrary
from artifactbot.operation import ImportArtifactOperation, describe

console = Console()

IMPORT_USAGE = (
    "Usage: `/import [job] [build=N] [branch=B] [artifact=NAME] [var=NAME]`\n"
    "job: required, build: number or alias (default lastSuccessfulBuild), "
    "branch: multi-branch projects only, artifact: default archive.zip, "
    "var: variable receiving the build number"
)
BUILDS_USAGE = "Usage: `/builds [job] [branch]`\njob: required, branch: optional"

IMPORT_OPTIONS = {
    "build": "build_number",
    "branch": "branch_name",
    "artifact": "artifact_name",
    "var": "output_variable",
}


def parse_import_args(args: List[str]) -> schemas.OperationConfig:
    """Turn ``/import`` arguments into an operation config."""
    values = {"job_name": args[0] if args else ""}
    for arg in args[1:]:
        key, sep, value = arg.partition("=")
        if not sep or key not in IMPORT_OPTIONS:
            raise ConfigurationError("Unknown option", field="option", value=arg)
        values[IMPORT_OPTIONS[key]] = value
    return schemas.OperationConfig(**values)


def build_operation() -> ImportArtifactOperation:
    library = ArtifactLibrary(
        settings.ARTIFACT_LIBRARY_DIR, unique=settings.ARTIFACT_LIBRARY_UNIQUE
    )
    return ImportArtifactOperation(library)


async def _allowed(
    chat: Chat, message: Message, context: ContextTypes.DEFAULT_TYPE
) -> bool:
    if chat.id in settings.ALLOWED_CHATS:
        return True
    console.print(f"[yellow]Unauthorized chat attempt from chat_id: {chat.id}[/yellow]")
    await context.bot.send_message(
        chat_id=chat.id,
        reply_to_message_id=message.message_id,
        text="You can't use this here",
    )
    return False


async def import_artifact(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
) -> None:
    """Handler for the /import command."""
    chat: Optional[Chat] = update.effective_chat
    message: Optional[Message] = update.effective_message

    if not chat or not message:
        console.print("[red]Chat or message object is None[/red]")
        return

    if not await _allowed(chat, message, context):
        return

    if not context.args:
        console.print("[yellow]No arguments provided for import command[/yellow]")
        await context.bot.send_message(
            chat_id=chat.id,
            reply_to_message_id=message.message_id,
            text=IMPORT_USAGE,
            parse_mode="Markdown",
        )
        return

    status: Optional[Message] = None
    try:
        config = parse_import_args(context.args)
        console.print("[green]Import request:[/green]", config)

        status = await context.bot.send_message(
            chat_id=chat.id,
            reply_to_message_id=message.message_id,
            text=describe(config),
        )

        result = await build_operation().execute(settings.connection_info(), config)
        if result.outputs:
            context.chat_data.setdefault("variables", {}).update(result.outputs)

        response_text = (
            f"Imported {result.artifact_name} ({result.size} bytes) "
            f"from build #{result.build_number} of {result.job_name}"
        )
        for name, value in result.outputs.items():
            response_text += f"\n${name} = {value}"
        await context.bot.edit_message_text(
            chat_id=chat.id,
            message_id=status.message_id,
            text=response_text,
        )
        return
    except ArtifactImportError as e:
        console.print(f"[red]{e.kind}: {e}[/red]")
        response_text = f"{e.kind}: {e}"
    except Exception:
        console.print("[red]Unexpected error occurred:[/red]")
        console.print_exception()
        response_text = "An error occurred"

    # Reuse the status message once the import has been announced
    if status:
        await context.bot.edit_message_text(
            chat_id=chat.id,
            message_id=status.message_id,
            text=response_text,
        )
        return

    await context.bot.send_message(
        chat_id=chat.id,
        reply_to_message_id=message.message_id,
        text=response_text,
    )


async def list_builds(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handler for the /builds command."""
    chat: Optional[Chat] = update.effective_chat
    message: Optional[Message] = update.effective_message

    if not chat or not message:
        console.print("[red]Chat or message object is None[/red]")
        return

    if not await _allowed(chat, message, context):
        return

    if not context.args:
        console.print("[yellow]No job provided for builds command[/yellow]")
        await context.bot.send_message(
            chat_id=chat.id,
            reply_to_message_id=message.message_id,
            text=BUILDS_USAGE,
            parse_mode="Markdown",
        )
        return

    job_name = context.args[0]
    branch_name = context.args[1] if len(context.args) > 1 else None

    try:
        client = JenkinsClient(settings.connection_info())
        builds = await client.list_builds(job_name, branch_name)
        if builds:
            response_text = "\n".join(
                f"#{build.number}: {build.result or 'IN PROGRESS'}" for build in builds
            )
        else:
            response_text = f"No builds found for {job_name}"
    except ArtifactImportError as e:
        console.print(f"[red]{e.kind}: {e}[/red]")
        response_text = f"{e.kind}: {e}"
    except Exception:
        console.print("[red]Unexpected error occurred:[/red]")
        console.print_exception()
        response_text = "An error occurred"

    await context.bot.send_message(
        chat_id=chat.id,
        reply_to_message_id=message.message_id,
        text=response_text,
    )
