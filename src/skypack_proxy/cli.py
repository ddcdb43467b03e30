"""skypack-proxy command line entry point.

    Returns:
        int: Exit code
"""
from __future__ import annotations

import json
import logging
import os
import sys

from .args import parse_args
from .cache import DirectoryArtifactCache
from .cli_config import apply_cli_overrides, apply_config, apply_env_overrides, load_config
from .common.logging_utils import configure_logging, extra_context
from .constants import Constants, ExitCodes
from .errors import MetadataFetchFailed, SkypackError, TransportError, UpstreamFetchFailed
from .fetcher import SkeletonFetcher
from .reporting import Report
from .versioning.models import Descriptor, Locator
from .versioning.parser import parse_ident, strip_protocol, stringify_ident, with_protocol
from .versioning.service import VersionResolutionService

logger = logging.getLogger(__name__)


def _prefixed(reference: str) -> str:
    return reference if strip_protocol(reference) is not None else with_protocol(reference)


def run_resolve(args, report: Report) -> int:
    """Resolve a descriptor and print the result as JSON."""
    descriptor = Descriptor(parse_ident(args.package), _prefixed(args.range))
    service = VersionResolutionService()
    if not service.supports(descriptor):
        logger.error("Unsupported reference: %s", args.range)
        return ExitCodes.RESOLUTION_ERROR.value

    if args.ALL_CANDIDATES:
        candidates = service.get_candidates(descriptor, report)
        print(json.dumps([c.reference for c in candidates], indent=2))
        return ExitCodes.SUCCESS.value

    result = service.resolve_descriptor(descriptor, report)
    if result.package is None:
        logger.error("No version of %s satisfies %s", stringify_ident(descriptor.identity), descriptor.range)
        return ExitCodes.RESOLUTION_ERROR.value
    print(json.dumps(result.package.to_dict(), indent=2))
    return ExitCodes.SUCCESS.value


def run_fetch(args, report: Report) -> int:
    """Generate or reuse the skeleton archive and print where it lives."""
    locator = Locator(parse_ident(args.package), _prefixed(args.version))
    cache = DirectoryArtifactCache(Constants.CACHE_DIR)
    fetcher = SkeletonFetcher()
    result = fetcher.fetch(locator, cache, report, expected_checksum=args.CHECKSUM)
    print(json.dumps({
        "archive": os.path.abspath(cache.archive_path(result.cache_key)),
        "checksum": result.checksum,
        "prefixPath": result.prefix_path,
        "warnings": [entry.text for entry in report.warnings],
    }, indent=2))
    return ExitCodes.SUCCESS.value


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    logger.debug(
        "CLI start",
        extra=extra_context(event="function_entry", component="cli", action="main", command=args.COMMAND),
    )

    try:
        apply_config(load_config(args.CONFIG))
    except (OSError, ValueError) as exc:
        logger.error("Unable to load config %s: %s", args.CONFIG, exc)
        return ExitCodes.FILE_ERROR.value
    apply_env_overrides()
    apply_cli_overrides(args)

    report = Report()
    try:
        if args.COMMAND == "resolve":
            return run_resolve(args, report)
        return run_fetch(args, report)
    except ValueError as exc:
        logger.error("%s", exc)
        return ExitCodes.RESOLUTION_ERROR.value
    except (MetadataFetchFailed, UpstreamFetchFailed, TransportError) as exc:
        logger.error("%s", exc.message)
        return ExitCodes.CONNECTION_ERROR.value
    except SkypackError as exc:
        logger.error("[%s] %s", exc.message_name.value, exc.message)
        return ExitCodes.RESOLUTION_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
