"""
Errors — The failure taxonomy of a sourcing run.

Every error raised by the sourcing pipeline derives from SourcingError, so the
orchestrator can catch one type and record the message. None of these are
retried: any of them aborts the run.

  CompilationError       A query or fragment references a field or type the
                         remote schema does not have. Raised before any
                         listing query is sent.
  TransportError         Network failure, non-success HTTP status, non-JSON
                         body, or a GraphQL "errors" array.
  MalformedPageError     A listing response without the {items, nextToken}
                         shape. A TransportError variant.
  SingletonMissingError  The singleton lookup returned nothing.
"""


class SourcingError(Exception):
    """Base class for all sourcing failures."""


class CompilationError(SourcingError):
    """A registered query or fragment does not match the remote schema."""


class TransportError(SourcingError):
    """A call to the remote endpoint failed."""


class MalformedPageError(TransportError):
    """A listing response is missing the items/nextToken shape."""


class SingletonMissingError(SourcingError):
    """The singleton lookup returned no result."""
