import time
import logging
import signal
import argparse

from core.app_context import AppContext
from core.config_loader import load_config
from database.init_db import init_db
from pipeline.runner import (
    PIPELINE_STEPS,
    run_power_match_pipeline,
    run_step,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False


def run_schedule(ctx: AppContext) -> None:
    """Run the full pipeline every schedule.interval_seconds until stopped."""
    interval = ctx.config.schedule.interval_seconds

    cycle_count = 0
    while running:
        cycle_count += 1
        cycle_start = time.time()
        logger.info(f"=== Starting Cycle #{cycle_count} ===")
        try:
            result = run_power_match_pipeline(ctx)
            if not result.success:
                logger.warning(f"Cycle #{cycle_count} finished with errors: {result.error}")
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)

        cycle_elapsed = time.time() - cycle_start
        if running:
            logger.info(f"=== Cycle #{cycle_count} completed in {cycle_elapsed:.2f}s. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running:
                    break
                time.sleep(5)


def main():
    parser = argparse.ArgumentParser(description="Power Match Driver")
    parser.add_argument('command', choices=list(PIPELINE_STEPS) + ['schedule'],
                        help='Step to run once, or "schedule" to loop over all steps')
    parser.add_argument('--user-id', type=str, default=None,
                        help='generate: run for a single candidate')
    parser.add_argument('--job-id', type=str, default=None,
                        help='generate-employer: run for a single job (requires --employer-id)')
    parser.add_argument('--employer-id', type=str, default=None)
    parser.add_argument('--config', type=str, default=None, help='Path to config.yaml')
    args = parser.parse_args()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = load_config(args.config)
    ctx = AppContext.build(config)

    # Initialize DB (with retry logic)
    init_db(ctx.engine)

    logger.info(f"Power Match driver starting: {args.command}")

    if args.command == 'schedule':
        run_schedule(ctx)
        return 0

    if args.command == 'generate' and args.user_id:
        summary = ctx.generator.generate_for_user(args.user_id)
        logger.info(f"Result: {summary.to_dict()}")
        return 0 if summary.status == "success" else 1

    if args.command == 'generate-employer' and args.job_id:
        if not args.employer_id:
            parser.error("--job-id requires --employer-id")
        summary = ctx.employer_generator.generate_for_job(args.job_id, args.employer_id)
        logger.info(f"Result: {summary.to_dict()}")
        return 0 if summary.status == "success" else 1

    result = run_step(ctx, args.command)
    logger.info(f"Result: {result.steps or result.error}")
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
