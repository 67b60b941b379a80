import logging
from typing import Any, Dict, List, Protocol, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from pydantic import ValidationError

from models import AccessError, BatchError, ConfigError, MutationRequest, Slide
from settings import ServiceAccountInfo

# --- Google API Constants ---
SCOPES = [
    "https://www.googleapis.com/auth/presentations",
    "https://www.googleapis.com/auth/drive",
]
TRANSPORT_ERRORS = (GoogleAuthError, httplib2.HttpLib2Error, OSError)


class PresentationAccess(Protocol):
    def fetch_slides(self, presentation_id: str) -> List[Slide]: ...

    def apply_batch(self, presentation_id: str, requests: Sequence[MutationRequest]) -> None: ...

    def check_access(self, presentation_id: str) -> None: ...


def describe_http_error(error: HttpError) -> str:
    """Formats an HttpError as '<status> <reason>' for logs and responses."""
    status = getattr(error.resp, "status", None)
    reason = getattr(error, "reason", None) or str(error)
    return f"{status} {reason}" if status else reason


class GoogleSlidesClient:
    """Thin wrapper around the Slides v1 API for one service account.

    Every method is a single remote call; nothing is cached between calls.
    """

    def __init__(self, service_account_info: ServiceAccountInfo, service: Any = None):
        if service is None:
            try:
                credentials = service_account.Credentials.from_service_account_info(
                    service_account_info.model_dump(exclude_none=True),
                    scopes=SCOPES,
                )
            except (ValueError, GoogleAuthError) as e:
                raise ConfigError(f"Invalid service account credentials: {e}") from e
            service = build("slides", "v1", credentials=credentials, cache_discovery=False)
        self._slides = service

    def _get_presentation(self, presentation_id: str, fields: str) -> Dict[str, Any]:
        try:
            return self._slides.presentations().get(
                presentationId=presentation_id,
                fields=fields,
            ).execute()
        except HttpError as e:
            raise AccessError(
                f"Cannot read presentation {presentation_id}: {describe_http_error(e)}"
            ) from e
        except TRANSPORT_ERRORS as e:
            raise AccessError(f"Cannot reach Slides API for presentation {presentation_id}: {e}") from e

    def fetch_slides(self, presentation_id: str) -> List[Slide]:
        presentation = self._get_presentation(presentation_id, fields="slides.objectId")
        raw_slides = presentation.get("slides") or []
        if not isinstance(raw_slides, list) or not all(isinstance(raw, dict) for raw in raw_slides):
            raise AccessError(f"Presentation {presentation_id} returned a malformed slide list")
        try:
            return [
                Slide(objectId=raw.get("objectId", ""), position=index)
                for index, raw in enumerate(raw_slides)
            ]
        except ValidationError as e:
            raise AccessError(f"Presentation {presentation_id} returned a slide without an objectId") from e

    def apply_batch(self, presentation_id: str, requests: Sequence[MutationRequest]) -> None:
        if not requests:
            logging.debug(f"Skipping empty batch for presentation {presentation_id}")
            return

        body = {"requests": [request.to_request() for request in requests]}
        try:
            self._slides.presentations().batchUpdate(
                presentationId=presentation_id,
                body=body,
            ).execute()
        except HttpError as e:
            raise BatchError(
                f"Batch update rejected for presentation {presentation_id}: {describe_http_error(e)}"
            ) from e
        except TRANSPORT_ERRORS as e:
            raise BatchError(f"Batch update failed for presentation {presentation_id}: {e}") from e

    def check_access(self, presentation_id: str) -> None:
        presentation = self._get_presentation(presentation_id, fields="presentationId,title")
        logging.info(f"Access confirmed for '{presentation.get('title', presentation_id)}' ({presentation_id})")


def create_slides_client(service_account_info: ServiceAccountInfo) -> GoogleSlidesClient:
    return GoogleSlidesClient(service_account_info)
