"""
MainPay Deployment - Main Entry Point
Deploys MainPay, funds it and pays the configured employee

Usage:
    python main.py --network localhost
    python main.py --network sepolia
"""

import argparse
import asyncio
import sys
from loguru import logger

from blockchain.network_config import load_network_config
from deployer.deploy_config import DeployConfig
from deployer.deploy_engine import DeploymentRunner


def configure_logging(log_file: str = "data/logs/deploy.log"):
    """Coloured stderr sink plus a rotating debug file"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="INFO"
    )
    logger.add(
        log_file,
        rotation="1 day",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Deploy and initialise the MainPay contract")
    parser.add_argument('--network', default=None, help="Network name from the network config")
    parser.add_argument('--network-config', default="config/network_config.json")
    parser.add_argument('--deploy-config', default="config/deploy_config.json")
    return parser.parse_args(argv)


async def main(args) -> int:
    """Run one deployment; returns the process exit code"""
    try:
        network_config = load_network_config(args.network_config)
        network = network_config.get_network(args.network)
        deploy_config = DeployConfig.load(args.deploy_config)

        runner = DeploymentRunner(deploy_config, network, solc_version=network_config.solidity)
        result = await runner.run()

    except Exception as e:
        logger.opt(exception=e).error(f"Deployment failed: {e}")
        return 1

    logger.info("=" * 70)
    logger.success(f"Contract address: {result.contract_address}")
    for key, value in result.to_dict().items():
        logger.info(f"  {key}: {value}")
    logger.info("=" * 70)
    return 0


if __name__ == "__main__":
    configure_logging()
    sys.exit(asyncio.run(main(parse_args())))
