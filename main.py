import asyncio
import logging

from aiohttp import web
from dotenv import load_dotenv

from rollgraph.models.config import AppConfig
from rollgraph.server import create_app

load_dotenv()

logger = logging.getLogger(__name__)


async def main():
    runner = None
    try:
        config = AppConfig.from_env()

        logging.basicConfig(
            level=logging.DEBUG if config.debug else logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        if not config.rollbar.is_configured():
            logger.warning(
                "No ACCOUNT_TOKEN or PROJECT_TOKEN set - every request must send "
                "x-account-token / x-project-token headers"
            )

        runner = web.AppRunner(create_app(config))
        await runner.setup()
        site = web.TCPSite(runner, config.server.host, config.server.port)
        await site.start()
        logger.info(f"Server is running on localhost:{config.server.port}")

        await asyncio.Event().wait()

    except Exception as e:
        logger.error(f"Fatal error: {e}")
    finally:
        if runner:
            await runner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
