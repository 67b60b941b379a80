import logging
from enum import Enum
from typing import List

from models import (
    AccessError,
    ArchiveError,
    ArchiveResult,
    BatchError,
    CopySlideRequest,
    DeleteSlideRequest,
)
from settings import ArchiveConfig
from slides_client import PresentationAccess

SUCCESS_MESSAGE = "Weekly slides archived successfully"


class ArchiveState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    COPYING = "copying"
    CLEARING = "clearing"
    DONE = "done"
    FAILED = "failed"


# --- Request builders ---
def build_copy_requests(slides) -> List[CopySlideRequest]:
    """One copy request per slide, destinations numbered slide_1..slide_N."""
    return [
        CopySlideRequest(objectId=slide.objectId, destinationObjectId=f"slide_{index + 1}")
        for index, slide in enumerate(slides)
    ]


def build_delete_requests(slides) -> List[DeleteSlideRequest]:
    """Delete requests for every slide but the first, which stays as a placeholder."""
    return [DeleteSlideRequest(objectId=slide.objectId) for slide in slides[1:]]


class ArchiveOrchestrator:
    """Validates both decks, copies current -> archive, then clears current.

    run() never raises for workflow errors; the first failure ends the run
    and is reported in the returned ArchiveResult.
    """

    def __init__(self, config: ArchiveConfig, client: PresentationAccess):
        self.config = config
        self.client = client
        self.state = ArchiveState.IDLE

    def validate_access(self) -> None:
        self.state = ArchiveState.VALIDATING
        logging.info("Validating access to both presentations...")
        try:
            self.client.check_access(self.config.current_slides_id)
            self.client.check_access(self.config.archive_slides_id)
        except AccessError as e:
            raise AccessError(f"Access validation failed: {e}") from e
        logging.info("Access validation successful")

    def copy_slides_to_archive(self) -> int:
        self.state = ArchiveState.COPYING
        logging.info("Starting slide copy process...")
        try:
            slides = self.client.fetch_slides(self.config.current_slides_id)
            logging.info(f"Found {len(slides)} slides to copy")
            if not slides:
                logging.info("No slides to copy")
                return 0

            self.client.apply_batch(self.config.archive_slides_id, build_copy_requests(slides))
        except AccessError as e:
            raise AccessError(f"Failed to copy slides: {e}") from e
        except BatchError as e:
            raise BatchError(f"Failed to copy slides: {e}") from e

        logging.info(f"Successfully copied {len(slides)} slides to archive")
        return len(slides)

    def clear_current_slides(self) -> int:
        self.state = ArchiveState.CLEARING
        logging.info("Starting slide deletion process...")
        try:
            # Re-fetched on purpose: the copy phase's list is not reused.
            slides = self.client.fetch_slides(self.config.current_slides_id)
            logging.info(f"Found {len(slides)} slides in current deck")
            if not slides:
                logging.info("No slides to delete")
                return 0

            delete_requests = build_delete_requests(slides)
            if delete_requests:
                self.client.apply_batch(self.config.current_slides_id, delete_requests)
        except AccessError as e:
            raise AccessError(f"Failed to delete slides: {e}") from e
        except BatchError as e:
            raise BatchError(f"Failed to delete slides: {e}") from e

        logging.info(f"Successfully deleted {len(delete_requests)} slides from current deck")
        return len(delete_requests)

    def run(self) -> ArchiveResult:
        try:
            self.validate_access()
            copied = self.copy_slides_to_archive()
            deleted = self.clear_current_slides()
        except ArchiveError as e:
            logging.error(f"Archive failed while {self.state.value}: {e}")
            self.state = ArchiveState.FAILED
            return ArchiveResult.failed(str(e), e.kind)

        self.state = ArchiveState.DONE
        logging.info("Archive process completed successfully")
        return ArchiveResult(
            success=True,
            message=SUCCESS_MESSAGE,
            copied_slides=copied,
            deleted_slides=deleted,
            archive_id=self.config.archive_slides_id,
            current_id=self.config.current_slides_id,
        )


def perform_archive(config: ArchiveConfig, client: PresentationAccess) -> ArchiveResult:
    return ArchiveOrchestrator(config, client).run()
