import asyncio
import os
import signal
import sys

import uvloop
from loguru import logger

from exceptions import ImageOptimError
from processor import run_tasks
from settings import init_settings
from version import VERSION

asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())


async def entry(names: list[str]) -> None:
    logger.info("imageoptim-batch {}", VERSION)
    config = init_settings()
    if not config.tasks:
        logger.warning("No task configured, nothing to do.")
        return
    await run_tasks(config, names)
    logger.info("Done.")


def main() -> int:
    # 确保 docker 退出时正确触发资源释放
    signal.signal(signal.SIGTERM, lambda *_: os.kill(os.getpid(), signal.SIGINT))
    with asyncio.Runner() as runner:
        try:
            runner.run(entry(sys.argv[1:]))
        except ImageOptimError as e:
            logger.error("{}", e)
            return 1
        except KeyboardInterrupt:
            logger.error("Exit Signal Received, exiting...")
            return 130
        except Exception:
            logger.exception("Unexpected error occurred, exiting...")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
