#!/usr/bin/env python3
"""
Registry Versions - CLI

Command-line interface for finding the latest version of each major.minor
line published to a container image repository.
"""

import argparse
import json
import yaml
import sys
from pathlib import Path

from .docker_hub import DockerHubTagSource, DEFAULT_HOST, DEFAULT_PAGE_SIZE
from .errors import FetchError
from .versions import VersionAggregator, parse_version

CONFIG_KEYS = ('host', 'namespace', 'repo', 'page_size', 'timeout')


def log(message: str, verbose: bool = False, force: bool = False):
    """Print a diagnostic message to stderr"""
    if verbose or force:
        print(message, file=sys.stderr)


def load_config(path: str) -> dict:
    """
    Load settings from a YAML config file

    Args:
        path: Path to a YAML mapping with any of host, namespace, repo,
            page_size, timeout

    Returns:
        Dict of the recognised settings
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    unknown = sorted(str(key) for key in config if key not in CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    for key in ('host', 'namespace', 'repo'):
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"'{key}' in {config_path} must be a string, got {value!r}")

    page_size = config.get('page_size')
    if page_size is not None and not is_positive(page_size, int):
        raise ValueError(f"'page_size' in {config_path} must be a positive integer, got {page_size!r}")

    timeout = config.get('timeout')
    if timeout is not None and not is_positive(timeout, (int, float)):
        raise ValueError(f"'timeout' in {config_path} must be a positive number, got {timeout!r}")

    return config


def is_positive(value, types) -> bool:
    # bool is an int subclass but never a valid size or timeout
    return isinstance(value, types) and not isinstance(value, bool) and value > 0


def collect_versions(source, strict: bool = False, verbose: bool = False) -> VersionAggregator:
    """
    Drain a tag source into a VersionAggregator

    Tags that are not versions are reported on stderr and skipped.

    Args:
        source: Iterable of tag names
        strict: Only accept full SemVer 2.0 tags (default: False)
        verbose: Print a summary to stderr

    Returns:
        VersionAggregator holding every parsed tag
    """
    versions = VersionAggregator()
    seen = 0
    skipped = 0

    for name in source:
        seen += 1
        version = parse_version(name, strict=strict)
        if version is None:
            skipped += 1
            log(f"ignoring unparsable version {name}", force=True)
            continue
        versions.insert(version)

    log(f"Processed {seen} tags ({skipped} skipped), {len(versions)} release lines", verbose)
    return versions


def format_versions(versions: VersionAggregator, output_format: str = 'json') -> str:
    """Serialize the aggregated versions as pretty-printed JSON or YAML"""
    data = versions.to_dict()
    if output_format == 'yaml':
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip('\n')
    return json.dumps(data, indent=2)


def latest_versions_command(args) -> int:
    """Print the latest version of each major.minor line"""
    source = DockerHubTagSource(
        namespace=args.namespace,
        repo=args.repo,
        host=args.host,
        page_size=args.page_size,
        timeout=args.timeout,
        verbose=args.verbose,
    )

    log(f"Fetching tags for {args.namespace}/{args.repo} from {args.host}...", args.verbose)

    try:
        versions = collect_versions(source, strict=args.strict, verbose=args.verbose)
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if source.rate_limited:
        log(f"Waited out {source.rate_limited} rate-limited responses", args.verbose)

    print(format_versions(versions, args.output_format))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='registry-versions',
        description='Report the latest version of each major.minor line of a container image'
    )
    parser.add_argument('--host', default=None,
                        help=f'Registry host (default: {DEFAULT_HOST})')
    parser.add_argument('-n', '--namespace', default=None,
                        help='Repository namespace (e.g., library)')
    parser.add_argument('-r', '--repo', default=None,
                        help='Repository name (e.g., python)')
    parser.add_argument('--config', default=None,
                        help='YAML file with host, namespace, repo, page_size, timeout')
    parser.add_argument('--strict', action='store_true',
                        help='Only accept full semantic version tags')
    parser.add_argument('--output-format', choices=['json', 'yaml'], default='json',
                        help='Output format (default: json)')
    parser.add_argument('--page-size', type=int, default=None,
                        help=f'Tags requested per page (default: {DEFAULT_PAGE_SIZE})')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Per-request timeout in seconds (default: none)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print progress to stderr')
    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Command-line values win over the config file
    if args.config:
        try:
            config = load_config(args.config)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        for key in CONFIG_KEYS:
            if getattr(args, key) is None:
                setattr(args, key, config.get(key))

    if args.host is None:
        args.host = DEFAULT_HOST
    if args.page_size is None:
        args.page_size = DEFAULT_PAGE_SIZE

    if not args.namespace or not args.repo:
        parser.error('--namespace and --repo are required (on the command line or in --config)')
    if not is_positive(args.page_size, int):
        parser.error('--page-size must be a positive integer')
    if args.timeout is not None and not is_positive(args.timeout, (int, float)):
        parser.error('--timeout must be a positive number')

    return latest_versions_command(args)


if __name__ == '__main__':
    sys.exit(main())
