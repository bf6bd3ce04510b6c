"""
Query Executor — Sends GraphQL operations to the Nacelle endpoint.

This module is responsible for all HTTP communication with the Nacelle space.
Every call is a POST carrying the operation document, its name and its
variables:

    POST https://hailfrequency.com/v2/graphql
    Headers:
        x-nacelle-space-id:    <space id>
        x-nacelle-space-token: <space GraphQL token>
    Body: {"query": "...", "operationName": "LIST_PRODUCTS", "variables": {...}}
    Response: {"data": {...}} or {"errors": [{"message": "..."}]}

The executor returns the "data" portion of the response. Anything else (a
network failure, a non-2xx status, a body that is not JSON, or a GraphQL
"errors" array) is raised as a TransportError whose message carries the
remote error text verbatim.

Pipeline context:
    Used by load_schema() (introspection), the SourcingEngine (LIST_ and NODE_
    queries) and the SingletonSourcer (NODE_SPACE).
"""

import requests
from typing import Dict, Any, Optional

from .errors import TransportError

DEFAULT_ENDPOINT = "https://hailfrequency.com/v2/graphql"


class QueryExecutor:
    """Client for the Nacelle GraphQL endpoint.

    Manages a requests.Session carrying the two space authentication headers.
    All calls go through this single session.

    Attributes:
        endpoint: GraphQL endpoint URL.
        space_id: Nacelle space identifier (x-nacelle-space-id).
        access_token: Nacelle space GraphQL token (x-nacelle-space-token).
        verbose: If True, print the operation name and variables of every call.
        timeout: Per-call timeout in seconds.
    """

    def __init__(
        self,
        space_id: str,
        access_token: str,
        endpoint: str = DEFAULT_ENDPOINT,
        verbose: bool = False,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the executor.

        Args:
            space_id: Nacelle space identifier.
            access_token: Nacelle space GraphQL token.
            endpoint: GraphQL endpoint URL.
            verbose: Enable per-call output.
            timeout: Per-call timeout in seconds.
            session: Optional pre-built session (mainly for tests).
        """
        self.endpoint = endpoint
        self.space_id = space_id
        self.access_token = access_token
        self.verbose = verbose
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "x-nacelle-space-id": space_id,
            "x-nacelle-space-token": access_token,
        })
        self.call_count = 0

    def execute(
        self, query: str, operation_name: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute one named operation.

        Args:
            query: The GraphQL document text (may hold several operations).
            operation_name: Which operation in the document to run.
            variables: Operation variables.

        Returns:
            The "data" portion of the GraphQL response (a dict).

        Raises:
            TransportError: On network failure, HTTP error status, a non-JSON
                body, or a GraphQL "errors" array.
        """
        variables = variables or {}
        payload = {
            "query": query,
            "operationName": operation_name,
            "variables": variables,
        }

        if self.verbose:
            print(f"  {operation_name} {variables}")

        self.call_count += 1
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            # an "errors" body takes precedence over the status line
            raise TransportError(self._graphql_errors(response) or str(e)) from e

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(f"Response from {self.endpoint} is not JSON: {e}") from e

        if not isinstance(result, dict):
            raise TransportError(f"Unexpected response from {self.endpoint}: {result!r}")

        if result.get("errors"):
            raise TransportError(self._graphql_errors(response))

        return result.get("data") or {}

    @staticmethod
    def _graphql_errors(response) -> Optional[str]:
        """Joined messages of a GraphQL "errors" body, or None if there is none."""
        try:
            result = response.json()
        except ValueError:
            return None
        if not isinstance(result, dict) or not result.get("errors"):
            return None
        return "; ".join(
            e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in result["errors"]
        )
