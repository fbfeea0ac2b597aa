from telegram.ext import ApplicationBuilder, CommandHandler

from artifactbot.handlers import import_artifact, list_builds

from .config import settings

if __name__ == "__main__":
    application = ApplicationBuilder().token(settings.TELEGRAM_BOT_TOKEN).build()

    application.add_handler(CommandHandler("import", import_artifact))
    application.add_handler(CommandHandler("builds", list_builds))

    application.run_polling()
