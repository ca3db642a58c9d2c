import logging
import sys

from assetmin.config import BatchConfig, Config, get_config
from assetmin.inputs import FromMapping, FromPattern, FromText
from assetmin.metrics import start_metrics_server
from assetmin.task import MinifyTask

logger = logging.getLogger(__name__)


def build_task(batch: BatchConfig, config: Config) -> MinifyTask:
    """Create a minify task from a configured batch."""
    if batch.sources is not None:
        task_input = FromMapping(batch.sources)
    elif batch.pattern is not None:
        task_input = FromPattern(batch.pattern)
    else:
        task_input = FromText(batch.text)

    task = MinifyTask(task_input, options=config.js, part_suffix=config.part_suffix)
    if batch.type:
        task.type(batch.type)
    if batch.destination:
        task.to(batch.destination)
    return task


def run_batches(config: Config) -> int:
    for index, batch in enumerate(config.batches, start=1):
        result = build_task(batch, config).run()
        if not result.success:
            logger.error(f"Batch {index} failed ({result.failure.kind.value}): {result.message}")
            return 1
        logger.info(f"Batch {index}: {result.message} ({result.files_processed} file(s))")
    return 0


if __name__ == "__main__":
    config = get_config()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.metrics_port:
        start_metrics_server(config.metrics_port)

    sys.exit(run_batches(config))
