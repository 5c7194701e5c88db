#!/usr/bin/env python3
"""
CLI for inspecting packaging resources as scripting values.

Usage:
    python -m pyembed describe MANIFEST [--json]
    python -m pyembed types [--json]

Examples:
    # Print each resource the way a packaging script would see it
    python -m pyembed describe resources.yaml

    # Same, as JSON for tooling
    python -m pyembed describe resources.yaml --json

    # List value kinds and the attributes scripts may read
    python -m pyembed types
"""

import argparse
import json
import sys
from pathlib import Path

from .logging_config import configure_logging, get_logger

log = get_logger("pyembed.cli")


def cmd_describe(args):
    """Convert manifest resources and print their scripting view."""
    from .manifest import ManifestError, ResourceManifest
    from .scripting import ScriptingError, describe_value, to_scripting_value

    manifest_path = Path(args.manifest)
    if not manifest_path.exists():
        print(f"Error: File not found: {manifest_path}", file=sys.stderr)
        return 1

    try:
        manifest = ResourceManifest.load(manifest_path)
        resources = list(manifest.resources())
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    described = []
    failures = 0
    for resource in resources:
        try:
            value = to_scripting_value(resource)
        except (ScriptingError, ValueError) as e:
            failures += 1
            print(f"Error: {resource.full_name}: {e}", file=sys.stderr)
            continue
        described.append(describe_value(value))

    if args.json:
        print(json.dumps(described, indent=2))
    else:
        for info in described:
            print(info["display"])
            for name, data in info["attributes"].items():
                print(f"    {name} = {data!r}")

    log.debug("described %d resource(s), %d failure(s)", len(described), failures)
    return 1 if failures else 0


def cmd_types(args):
    """List the wrapped value kinds and their attributes."""
    from .scripting import get_api_reference

    api = get_api_reference()
    if args.json:
        print(json.dumps(api, indent=2))
        return 0

    for kind, info in api.items():
        print(f"{kind}:")
        for name, attr_type in info["attributes"].items():
            print(f"    {name}: {attr_type}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m pyembed',
        description='Inspect packaging resources as scripting values',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='action', required=True)

    describe_parser = subparsers.add_parser('describe', help='Describe resources in a manifest')
    describe_parser.add_argument('manifest', help='Resource manifest (YAML or JSON)')
    describe_parser.add_argument('--json', action='store_true', help='Emit JSON')

    types_parser = subparsers.add_parser('types', help='List resource value kinds')
    types_parser.add_argument('--json', action='store_true', help='Emit JSON')

    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)

    if args.action == 'describe':
        return cmd_describe(args)
    elif args.action == 'types':
        return cmd_types(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
