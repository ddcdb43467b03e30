"""Argument parsing functionality for skypack-proxy."""

import argparse


def _compression_level(value: str) -> int:
    level = int(value)
    if not 0 <= level <= 9:
        raise argparse.ArgumentTypeError("compression level must be between 0 and 9")
    return level


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="skypack-proxy",
        description=(
            "skypack-proxy - resolve skypack: references and build thin CDN-backed packages"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    sub = parser.add_subparsers(dest="COMMAND", required=True)

    resolve = sub.add_parser("resolve", help="Resolve a range or tag to a concrete version")
    resolve.add_argument("package", help="Package identifier, e.g. preact or @scope/name")
    resolve.add_argument("range", help="Semver range or dist-tag (the skypack: prefix is optional)")
    resolve.add_argument("--all",
                         dest="ALL_CANDIDATES",
                         help="Print every candidate instead of the resolved package",
                         action="store_true")

    fetch = sub.add_parser("fetch", help="Generate (or reuse) the skeleton archive for a version")
    fetch.add_argument("package", help="Package identifier, e.g. preact or @scope/name")
    fetch.add_argument("version", help="Exact version (the skypack: prefix is optional)")
    fetch.add_argument("--checksum",
                       dest="CHECKSUM",
                       help="Expected sha512 checksum of the archive",
                       action="store",
                       type=str)
    fetch.add_argument("--cache-dir",
                       dest="CACHE_DIR",
                       help="Directory holding generated archives",
                       action="store",
                       type=str)
    fetch.add_argument("--compression-level",
                       dest="COMPRESSION_LEVEL",
                       help="Archive compression level (0-9)",
                       action="store",
                       type=_compression_level)
    fetch.add_argument("--expand-exports",
                       dest="EXPAND_EXPORT_MAPS",
                       help="Emit one module per entry of the package export map",
                       action="store_true")

    return parser.parse_args(argv)
