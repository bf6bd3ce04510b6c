"""
Sourcing Orchestrator — Run coordination for Nacelle node sourcing.

This module ties the sourcing pipeline (QueryExecutor, sourcing config,
SourcingEngine, SingletonSourcer) to the environment and the snapshot output,
as a sequential 2-step workflow:

  Step 1: SOURCE NODES
      Introspects the remote schema, reads or generates the fragment of every
      entity type in FRAGMENTS_DIR, and compiles the LIST_ / NODE_ documents.
      A compilation error stops the run before any listing query is sent.
      Then walks every paginated type (Product, Collection) to exhaustion,
      upserts their nodes, and sources the Space singleton last.

  Step 2: SAVE SNAPSHOT
      Writes nodes.json into a timestamped output directory.

Any failure is recorded as "Problem sourcing data from Nacelle: <cause>" and
ends the run; sourcing_results.json is written either way once an output
directory exists.

Configuration:
    All settings are loaded from environment variables (typically via .env file).
    Required: NACELLE_SPACE_ID, NACELLE_GRAPHQL_TOKEN.
    See config/settings.py for defaults.

Typical usage:
    orchestrator = SourcingOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from nacelle_shared import OutputManager

from config import DEFAULT_SETTINGS

from .node_store import InMemoryNodeStore
from .query_executor import QueryExecutor
from .source_nodes import source_nodes


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


class SourcingOrchestrator:
    """Orchestrates one Nacelle sourcing run.

    Attributes:
        space_id: Nacelle space identifier.
        access_token: Nacelle space GraphQL token.
        endpoint: GraphQL endpoint URL.
        provider_name: Label used in snapshot folder naming.
        fragments_dir: Fragment cache directory.
        type_prefix: Node type prefix.
        save_json: Whether to write the node snapshot to disk.
        verbose: Whether to print every operation and its variables.
        output_manager: Handles timestamped snapshot dirs and retention cleanup.
        node_store: Receives the sourced nodes.
    """

    def __init__(self, env_file: str = "./.env", node_store: Optional[InMemoryNodeStore] = None):
        """Initialize the orchestrator by loading configuration from environment.

        Args:
            env_file: Path to a .env file. If the file exists, it is loaded via
                      python-dotenv. Otherwise, falls back to system environment.
            node_store: Target store (a fresh InMemoryNodeStore by default).
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        # Nacelle space credentials (required)
        self.space_id = os.getenv("NACELLE_SPACE_ID", "")
        self.access_token = os.getenv("NACELLE_GRAPHQL_TOKEN", "")

        self.endpoint = os.getenv("NACELLE_ENDPOINT", DEFAULT_SETTINGS["NACELLE_ENDPOINT"])
        self.provider_name = os.getenv("PROVIDER_NAME", DEFAULT_SETTINGS["PROVIDER_NAME"])
        self.fragments_dir = os.getenv("FRAGMENTS_DIR", DEFAULT_SETTINGS["FRAGMENTS_DIR"])
        self.type_prefix = os.getenv("TYPE_PREFIX", DEFAULT_SETTINGS["TYPE_PREFIX"])

        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        retention_days = int(os.getenv("OUTPUT_RETENTION_DAYS", str(DEFAULT_SETTINGS["OUTPUT_RETENTION_DAYS"])))

        self.save_json = _env_flag("SAVE_JSON")
        self.verbose = _env_flag("VERBOSE")

        self.output_manager = OutputManager(output_dir, self.provider_name, retention_days)
        self.node_store = node_store if node_store is not None else InMemoryNodeStore()

    def validate_config(self) -> bool:
        """Check that all required configuration values are present.

        Returns:
            True if all required values are present, False otherwise.
            Prints specific error messages for each missing value.
        """
        errors = []
        if not self.space_id:
            errors.append("NACELLE_SPACE_ID is required")
        if not self.access_token:
            errors.append("NACELLE_GRAPHQL_TOKEN is required")
        if not self.endpoint:
            errors.append("NACELLE_ENDPOINT must not be empty")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def create_executor(self) -> QueryExecutor:
        return QueryExecutor(
            self.space_id, self.access_token, endpoint=self.endpoint, verbose=self.verbose
        )

    def run(self, executor: Optional[QueryExecutor] = None) -> Dict[str, Any]:
        """Execute the full sourcing run.

        Args:
            executor: Optional executor (built from configuration by default).

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - connector: "nacelle-graphql"
                - config: Endpoint, fragments dir, type prefix
                - success: True if all steps completed without error
                - summary: Node counts per remote type
                - nodes_path: Path to the node snapshot (if save_json=True)
                - error: Error message (if success=False)
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "connector": "nacelle-graphql",
            "config": {
                "endpoint": self.endpoint,
                "fragments_dir": self.fragments_dir,
                "type_prefix": self.type_prefix,
            },
            "success": False,
        }

        try:
            executor = executor or self.create_executor()

            # Step 1: Compile queries, walk paginated types, then the singleton
            print(f"\n{'='*60}")
            print("STEP 1: SOURCE NODES")
            print("="*60)
            counts = source_nodes(
                executor,
                self.node_store,
                self.fragments_dir,
                type_prefix=self.type_prefix,
                debug=self.verbose,
            )
            results["summary"] = counts
            results["requests"] = getattr(executor, "call_count", None)

            # Step 2: Snapshot
            print(f"\n{'='*60}")
            print("STEP 2: SAVE SNAPSHOT")
            print("="*60)
            self.output_manager.create_timestamped_dir()

            if self.save_json:
                nodes = [node.to_dict() for node in self.node_store.all_nodes()]
                results["nodes_path"] = self.output_manager.write_json("nodes.json", nodes)
                print(f"  Saved {len(nodes)} nodes: {results['nodes_path']}")

            results["success"] = True

        except Exception as e:
            results["error"] = str(e)
            print(f"\n  ERROR: {e}")
            if self.verbose:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        # Save run metadata alongside the node snapshot
        if self.output_manager.current_dir:
            results_path = self.output_manager.write_json("sourcing_results.json", results)
            print(f"\n  Results saved to: {results_path}")

        return results

    def print_summary(self, results: Dict):
        """Print a human-readable run summary.

        Args:
            results: The dict returned by run().
        """
        print(f"\n{'='*60}")
        print("SOURCING COMPLETE")
        print("="*60)
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")

        for type_name, count in (results.get("summary") or {}).items():
            print(f"{type_name}: {count}")

        if results.get("requests") is not None:
            print(f"Requests: {results['requests']}")

        if results.get("error"):
            print(f"Error: {results['error']}")
