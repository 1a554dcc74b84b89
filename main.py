"""
SupplyChainTracker Deployer - Main Entry Point
Deploys the SupplyChainTracker contract and prints a deployment summary
"""

import os
import sys
import asyncio
from loguru import logger

from blockchain.errors import DeploymentError
from deployer.config import DeployerConfig
from deployer.models import DeploymentOutcome
from deployer.runner import create_runner


def configure_logging():
    """Configure loguru sinks"""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=os.getenv('LOG_LEVEL', 'INFO')
    )

    log_file = os.getenv('LOG_FILE')
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


async def deploy() -> DeploymentOutcome:
    """Load configuration and run one deployment"""
    try:
        config = DeployerConfig.load()
    except DeploymentError as e:
        logger.error(f"Deployment failed: {e!r}")
        return DeploymentOutcome.failure(e)

    runner = create_runner(config)
    return await runner.run()


def main() -> int:
    """Main entry point"""
    configure_logging()

    try:
        outcome = asyncio.run(deploy())
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1

    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
