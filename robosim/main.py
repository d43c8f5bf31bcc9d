import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional

from dependency_injector import providers
from loguru import logger

from robosim.config import Config
from robosim.containers import ApplicationContainer
from robosim.enums.tool_name import ToolName
from robosim.exceptions.config_exceptions import ConfigException
from robosim.models.tool_results import ToolExecutionResult


async def run_tool(
    container: ApplicationContainer, session_id: str, tool: str, args: Dict[str, Any]
) -> ToolExecutionResult:
    store = container.state_store()
    service = container.service()

    await store.start()
    try:
        return await service.execute(session_id, tool, args)
    finally:
        await store.stop()


def main(
    config_path: Optional[str], session_id: str, tool: str, raw_args: str
) -> int:
    container = ApplicationContainer(config_path=providers.Object(config_path))

    try:
        config: Config = container.config()
    except ConfigException as e:
        logger.error(f"Configuration error: {e}")
        return 1

    # stdout carries the result envelope
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if config.verbose else "INFO")

    try:
        args = json.loads(raw_args)
    except json.JSONDecodeError as e:
        logger.error(f"--args is not valid JSON: {e}")
        return 2
    if not isinstance(args, dict):
        logger.error("--args must be a JSON object")
        return 2

    try:
        result = asyncio.run(run_tool(container, session_id, tool, args))
    except KeyboardInterrupt:
        logger.info("Shutdown requested")
        return 130

    print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


def cli():
    parser = argparse.ArgumentParser(
        description="Run one simulation tool and print its result envelope"
    )
    parser.add_argument(
        "config",
        help="The .env configuration file",
        type=str,
        default=None,
        nargs="?",
    )
    parser.add_argument("--session", default="cli", help="Session id")
    parser.add_argument(
        "--tool", required=True, help=f"One of: {', '.join(ToolName.values())}"
    )
    parser.add_argument("--args", default="{}", help="Tool arguments as a JSON object")
    args = parser.parse_args()

    sys.exit(main(args.config, args.session, args.tool, args.args))


if __name__ == "__main__":
    cli()
