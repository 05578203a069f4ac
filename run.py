import asyncio
from datetime import datetime, timezone
import time

from dotenv import load_dotenv
import hydra
from loguru import logger
from omegaconf import DictConfig
import uvicorn

from lexevo.api import create_app
from lexevo.config import LexiconConfig
from lexevo.database import build_snapshot_storage
from lexevo.evolution.engine import EvolutionEngine
from lexevo.runner import LexiconRunner
from lexevo.service import LexiconService
from lexevo.utils.logger_setup import setup_logger
from lexevo.utils.serve import drain, wait_for_shutdown


async def run_server(config: LexiconConfig) -> None:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("Lexicon Live")
    logger.info("=" * 80)
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    service: LexiconService | None = None
    try:
        logger.info("Step 1/3: Loading lexicon...")
        engine = EvolutionEngine(config=config.engine)
        service = LexiconService(
            engine, build_snapshot_storage(config.storage), config.sync
        )
        await service.bootstrap()
        logger.info(
            "Step 1/3: Complete | gen {}, {} words",
            engine.state.generation,
            engine.state.word_count,
        )

        logger.info("Step 2/3: Initial peer sync...")
        if await service.sync():
            logger.info("Step 2/3: Mirroring peer")
        else:
            logger.info("Step 2/3: Peer not reachable; running with local state")

        logger.info("Step 3/3: Serving on {}:{}", config.api.host, config.api.port)
        server = uvicorn.Server(
            uvicorn.Config(
                create_app(service),
                host=config.api.host,
                port=config.api.port,
                log_config=None,
            )
        )
        # uvicorn would otherwise replace our SIGINT/SIGTERM handlers
        server.install_signal_handlers = lambda: None
        server_task = asyncio.create_task(server.serve(), name="http-server")

        runner = LexiconRunner(service, config.runner)
        runner.start()

        reason = await wait_for_shutdown([server_task])
        logger.info("Shutdown requested ({})", reason)
        await runner.stop()
        server.should_exit = True
        await drain([server_task])

    except KeyboardInterrupt:
        logger.info("Lexicon server interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Lexicon server failed: {e}")
        raise
    finally:
        logger.info("Starting cleanup...")
        if service is not None:
            await service.close()
        duration = time.time() - start_time
        logger.info(f"Uptime: {duration:.2f} seconds ({duration / 3600:.2f} hours)")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    load_dotenv()

    config = LexiconConfig.from_omegaconf(cfg)
    log_file_path = setup_logger(config.logging)
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_server(config))


if __name__ == "__main__":
    main()
