from enum import Enum
from typing import Any, Dict, Optional, Union, Literal

from pydantic import BaseModel, ConfigDict, Field


class Slide(BaseModel):
    objectId: str = Field(min_length=1)
    position: int = Field(ge=0)


# --- Batch mutation requests ---
class CopySlideRequest(BaseModel):
    kind: Literal["copy"] = "copy"
    objectId: str
    destinationObjectId: str

    def to_request(self) -> Dict[str, Any]:
        return {
            "copyPaste": {
                "objectId": self.objectId,
                "destinationObjectId": self.destinationObjectId,
            }
        }


class DeleteSlideRequest(BaseModel):
    kind: Literal["delete"] = "delete"
    objectId: str

    def to_request(self) -> Dict[str, Any]:
        return {"deleteObject": {"objectId": self.objectId}}


MutationRequest = Union[CopySlideRequest, DeleteSlideRequest]


# --- Errors ---
class ErrorKind(str, Enum):
    CONFIG = "config"
    ACCESS = "access"
    BATCH = "batch"
    UNEXPECTED = "unexpected"


class ArchiveError(Exception):
    kind = ErrorKind.UNEXPECTED


class ConfigError(ArchiveError):
    """Missing or malformed credentials or presentation IDs."""
    kind = ErrorKind.CONFIG


class AccessError(ArchiveError):
    """Presentation is unreadable: bad ID, no permission, or service unreachable."""
    kind = ErrorKind.ACCESS


class BatchError(ArchiveError):
    """The remote service rejected a batch of slide mutations."""
    kind = ErrorKind.BATCH


# --- Workflow result ---

class ArchiveResult(BaseModel):
    """Outcome of one archive run. Rendered as the HTTP response body."""
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    copied_slides: int = 0
    deleted_slides: int = 0
    archive_id: Optional[str] = None
    current_id: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failed(cls, error: str, kind: ErrorKind) -> "ArchiveResult":
        return cls(
            success=False,
            message="Failed to archive weekly slides",
            error=error,
            error_kind=kind,
        )

    def to_response(self) -> Dict[str, Any]:
        if self.success:
            return ArchiveSuccessResponse(
                message=self.message,
                data=ArchiveData(
                    copiedSlides=self.copied_slides,
                    deletedSlides=self.deleted_slides,
                    archiveId=self.archive_id,
                    currentId=self.current_id,
                ),
            ).model_dump()
        return ArchiveFailureResponse(message=self.message, error=self.error or "Unknown error").model_dump()


# --- Pydantic Models for API ---
class ArchiveData(BaseModel):
    copiedSlides: int
    deletedSlides: int
    archiveId: str
    currentId: str


class ArchiveSuccessResponse(BaseModel):
    success: Literal[True] = True
    message: str
    data: ArchiveData


class ArchiveFailureResponse(BaseModel):
    success: Literal[False] = False
    message: str
    error: str


class MethodNotAllowedResponse(BaseModel):
    success: Literal[False] = False
    message: str = "Method not allowed. Use POST."
