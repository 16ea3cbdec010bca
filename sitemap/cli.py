# -*- coding: utf-8 -*-
"""
created on: 2025-12-09
use:        command line entry point for the site map pipeline
"""

# import packages =============================================================

import sys
import logging
import argparse

from pathlib import Path

from sitemap.config import SiteMapConfig
from sitemap.errors import SiteMapError
from sitemap.pipeline import run
from sitemap.render import STAGES, available_stages

logger = logging.getLogger("sitemap")

# define functions ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="sitemap",
        description="Static site location map from a coastline shapefile "
                    "and a CSV of survey sites",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # richest map the configuration allows
  sitemap config/barkley_sound.yaml

  # one file per stage, from outline to colours by category
  sitemap config/barkley_sound.yaml --all-stages --output maps/site_map.png
        """
    )

    parser.add_argument("config", type=Path,
                        help="path to the YAML configuration file")

    stage = parser.add_mutually_exclusive_group()
    stage.add_argument("--stage", choices=STAGES,
                       help="draw the map up to this stage only")
    stage.add_argument("--all-stages", action="store_true",
                       help="write one map per stage")

    parser.add_argument("--output", type=Path, default=None,
                        help="output image (default: input_paths.output)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging level (default: INFO)")

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S")

    try:
        config = SiteMapConfig.from_yaml(args.config)

        stages = None
        if args.all_stages:
            stages = list(available_stages(config.columns))
        elif args.stage:
            stages = [args.stage]

        result = run(config, stages=stages, output=args.output)
    except SiteMapError as err:
        logger.error("%s: %s", type(err).__name__, err)
        return 1

    for path in result.output_paths:
        print(path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
