"""
Errors

Exception taxonomy for the pipeline.

    GraphRAGError
    ├── InvalidRequestError     request rejected before pipeline entry
    ├── OrchestrationError      unexpected failure, surfaced as a service error
    └── MalformedResponseError  collaborator payload could not be interpreted

Soft collaborator failures never surface as exceptions: stage components
catch them and return a degraded StageOutcome. asyncio.CancelledError is not
part of this hierarchy and always propagates unchanged.
"""


class GraphRAGError(Exception):
    """Base class for pipeline errors."""

    pass


class InvalidRequestError(GraphRAGError, ValueError):
    """Request failed validation (missing or blank query, bad shape)."""

    pass


class OrchestrationError(GraphRAGError):
    """Unexpected failure while processing a request."""

    def __init__(self, message: str = "An error occurred while processing your request") -> None:
        super().__init__(message)


class MalformedResponseError(GraphRAGError):
    """A collaborator returned a payload of the wrong shape."""

    pass
