"""wolfi-package-status - latest package versions across Wolfi repositories

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from analysis.query import InvalidPatternError, build_queries
from args import build_parser, parse_args
from cli_config import AuthRequiredError, ConfigError, build_run_config
from common.logging_utils import ENV_LOG_LEVEL, configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from runner import execute


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        build_parser().print_help(sys.stderr)
        sys.exit(ExitCodes.FILE_ERROR.value)

    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    os.environ[ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        queries = build_queries(args.packages, regex=args.REGEX)
    except InvalidPatternError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        config = build_run_config(args)
    except AuthRequiredError as e:
        sys.stderr.write("\n")
        logging.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except ConfigError as e:
        logging.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    logging.info(
        "Querying %d package indices: %s",
        len(config.sources),
        ", ".join(s.name for s in config.sources),
    )

    errors = execute(
        queries,
        config,
        all_versions=args.ALL_VERSIONS,
        show_parent=args.SHOW_PARENT,
        show_sub=args.SHOW_SUB,
        as_json=args.JSON,
        out=sys.stdout,
        err=sys.stderr,
    )

    if errors:
        logging.warning("%d of %d package indices could not be read.", len(errors), len(config.sources))
        sys.exit(ExitCodes.CONNECTION_ERROR.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
