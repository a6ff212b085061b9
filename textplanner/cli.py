import argparse
import json
import logging
from pathlib import Path

from textplanner.config import PlanningConfig
from textplanner.planner import TextPlanner


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate and print a text planning configuration.")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to planning config JSON file. Defaults are used when omitted.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Also instantiate the planner to check that all named components exist.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_data = {}
    if args.config:
        config_data = json.loads(Path(args.config).read_text(encoding="utf-8"))
    config = PlanningConfig.from_dict(config_data)

    if args.check:
        TextPlanner(config)

    print(json.dumps(config.to_dict(), indent=2))


if __name__ == "__main__":
    main()
