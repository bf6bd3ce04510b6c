#!/usr/bin/env python3
"""
Nacelle Node Sourcing — Entry Point.

This is the main script that users run to source a Nacelle space into a
local node snapshot. It reads configuration from a .env file, runs the
sourcing pipeline, and saves the nodes as structured JSON output.

The run (managed by SourcingOrchestrator) performs 2 steps:
  1. Compile the sourcing queries against the remote schema, walk every
     Product and Collection page, then source the Space singleton
  2. Save the node snapshot to a timestamped directory

Usage:
    python run.py                        # Source and save JSON
    python run.py --verbose              # Print every operation and its variables
    python run.py --fragments-dir ./gql  # Use another fragment cache
    python run.py --no-save              # Source without writing nodes.json
    python run.py --version              # Show version
    python run.py --env /path            # Use alternate .env file
"""

import sys
import argparse
from importlib.metadata import PackageNotFoundError, version

from sourcing import SourcingOrchestrator

try:
    VERSION = version("nacelle-node-sourcing")
except PackageNotFoundError:
    VERSION = "unknown"


def main():
    """Parse CLI arguments and run the sourcing pipeline."""
    parser = argparse.ArgumentParser(
        description="Nacelle Node Sourcing - Source products, collections and space data into a node snapshot"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--verbose", action="store_true", help="Print every operation and its variables")
    parser.add_argument("--fragments-dir", help="Fragment cache directory")
    parser.add_argument("--no-save", action="store_true", help="Do not write nodes.json")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args()

    if args.version:
        print(f"nacelle-node-sourcing {VERSION}")
        sys.exit(0)

    # Initialize the orchestrator (loads .env and builds internal config)
    orchestrator = SourcingOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.verbose:
        orchestrator.verbose = True
    if args.fragments_dir:
        orchestrator.fragments_dir = args.fragments_dir
    if args.no_save:
        orchestrator.save_json = False

    print(f"\n{'='*60}")
    print(f"NACELLE NODE SOURCING v{VERSION}")
    print("="*60)
    print(f"Endpoint: {orchestrator.endpoint}")
    print(f"Fragments: {orchestrator.fragments_dir}")

    # Validate required configuration before proceeding
    if not orchestrator.validate_config():
        sys.exit(1)

    # Cleanup old snapshot folders based on retention policy
    if orchestrator.output_manager.retention_days > 0:
        deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.verbose)
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    results = orchestrator.run()

    orchestrator.print_summary(results)

    # Exit with error code if sourcing failed
    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
