import argparse
import sys

from loguru import logger

from thepaper.config import Settings
from thepaper.errors import ConfigError, PipelineError
from thepaper.mainflow import execute


def main(argv=None):
    parser = argparse.ArgumentParser(prog="thepaper", description="Build the daily tech digest")
    parser.add_argument("--dry-run", action="store_true", help="Run without sending emails (preview mode)")
    parser.add_argument("--sources", help="Source registry JSON file or directory")
    parser.add_argument("--top", type=int, help="Number of articles to select")
    args = parser.parse_args(argv)

    try:
        settings = Settings.build_from_envs()
        if args.sources:
            settings.rss_resource = args.sources
        if args.top is not None:
            if args.top < 1:
                raise ConfigError(f"top_n must be positive, got {args.top}")
            settings.top_n = args.top

        logger.remove()
        logger.add(sys.stderr, level=settings.log_level)

        execute(dry_run=args.dry_run, settings=settings)
    except PipelineError as e:
        logger.error(f"❌ Digest run failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
