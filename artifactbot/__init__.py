import logging

from rich.logging import RichHandler

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
logging.basicConfig(level=logging.INFO, format=FORMAT, handlers=[RichHandler()])
# Request lines from the HTTP stack and the bot's polling loop are noise.
for name in ("httpx", "httpcore", "telegram.ext"):
    logging.getLogger(name).setLevel(logging.WARNING)

logger = logging.getLogger("artifactbot")
