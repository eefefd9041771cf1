"""
Queue message schemas for the CSV processing and dead-letter queues.

Bodies are JSON with camelCase keys and a `type` discriminator.
"""
import logging
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

CSV_FILE_UPLOADED = "csv_file_uploaded"
CSV_CHUNK = "csv_chunk"


class QueueModel(BaseModel):
    """Base for wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FileUploadedMessage(QueueModel):
    """Triggers the split step for an accepted upload."""
    type: Literal["csv_file_uploaded"] = CSV_FILE_UPLOADED
    job_id: str
    seller_id: str
    object_key: str
    file_name: str
    total_rows: int


class ChunkMessage(QueueModel):
    """One slice of a file's data rows, produced by the split step."""
    type: Literal["csv_chunk"] = CSV_CHUNK
    job_id: str
    seller_id: str
    object_key: str
    chunk_index: int = Field(..., ge=0)
    total_chunks: int = Field(..., ge=1)
    start_row: int = Field(..., ge=1)
    end_row: int = Field(..., ge=1)
    header_line: str
    rows: List[str]
    generation: int = 0

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1


class DeadLetterMessage(QueueModel):
    """A chunk message that exceeded its receive budget on the main queue."""
    original_message: ChunkMessage
    error: str
    receive_count: int
    failed_at: datetime


QueueMessage = Annotated[Union[FileUploadedMessage, ChunkMessage], Field(discriminator="type")]

_queue_message_adapter = TypeAdapter(QueueMessage)

KNOWN_MESSAGE_TYPES = {CSV_FILE_UPLOADED, CSV_CHUNK}


def parse_queue_message(body: dict) -> Optional[Union[FileUploadedMessage, ChunkMessage]]:
    """
    Parse a main-queue body into its typed message.

    Args:
        body: Decoded JSON body

    Returns:
        The typed message, or None when the `type` is not one this service handles

    Raises:
        pydantic.ValidationError: If a known type carries an invalid payload
    """
    message_type = body.get("type") if isinstance(body, dict) else None
    if message_type not in KNOWN_MESSAGE_TYPES:
        logger.warning("Unknown message type %r, skipping", message_type)
        return None
    return _queue_message_adapter.validate_python(body)


def parse_dead_letter_message(body: dict) -> Union[DeadLetterMessage, FileUploadedMessage, ChunkMessage, None]:
    """
    Parse a dead-letter queue body.

    The worker wraps chunks it short-circuits in a DeadLetterMessage, while the
    queue's redrive policy moves the original body unchanged, so both shapes
    are accepted.
    """
    try:
        if isinstance(body, dict) and "originalMessage" in body:
            return DeadLetterMessage.model_validate(body)
        return parse_queue_message(body)
    except ValidationError:
        logger.error("Malformed dead-letter body, skipping: %s", body)
        return None
