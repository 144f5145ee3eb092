from dotenv import load_dotenv

# Constants read the environment at import time
load_dotenv()

import uvicorn  # noqa: E402
from loguru import logger  # noqa: E402

from jitsi_bridge.app import create_app  # noqa: E402
from jitsi_bridge.constants import HOST, PORT  # noqa: E402
from jitsi_bridge.logging_config import setup_logging  # noqa: E402


def main() -> None:
    setup_logging()
    logger.info(f"Starting Jitsi bridge on {HOST}:{PORT}")
    uvicorn.run(create_app(), host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
