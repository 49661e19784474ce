"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness response.

    Attributes:
        status: "healthy" whenever the process can serve requests.
        version: Installed badge_consensus version.
    """

    status: str
    version: str
