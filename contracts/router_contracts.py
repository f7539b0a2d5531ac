"""Router contracts for classifying incoming requests."""

from pydantic import BaseModel, Field
from enum import Enum


class RequestIntent(str, Enum):
    """What the user is asking the system to do."""
    BUILD = "build"
    EDIT = "edit"
    QUERY = "query"


class RequestClassification(BaseModel):
    """Classification result for a user request."""
    intent: RequestIntent = Field(..., description="Detected intent of the request")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence in classification")
    evidence: str = Field(..., description="Evidence supporting this classification")
