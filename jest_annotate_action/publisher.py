"""Publish annotations to a check run in API sized batches."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from jest_annotate_action.annotations import Annotation
from jest_annotate_action.errors import ApiError, PublishError
from jest_annotate_action.github.client import ChecksClient

log = logging.getLogger(__name__)

# The Checks API accepts at most 50 annotations per request
MAX_ANNOTATIONS_PER_REQUEST = 50
OUTPUT_TITLE = "Result"


def chunk_annotations(
    annotations: Sequence[Annotation], size: int = MAX_ANNOTATIONS_PER_REQUEST
) -> Iterator[Sequence[Annotation]]:
    """Split annotations into contiguous chunks of at most `size` entries."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(annotations), size):
        yield annotations[start : start + size]


@dataclass(frozen=True, kw_only=True)
class BatchPublisher:
    """Publishes annotations to one check run, batch after batch."""

    client: ChecksClient

    async def publish(
        self,
        *,
        check_run_id: int,
        check_name: str,
        head_sha: str,
        summary: str,
        annotations: Sequence[Annotation],
    ) -> int:
        """Publish all annotations and return the number of batches sent.

        Batches are sent in order, each awaited before the next. The first
        failure aborts the remaining batches. Without annotations a single
        batch carrying only the summary is sent, so the result is at least 1.

        Raises:
            PublishError: If a batch update fails

        """
        batches = list(chunk_annotations(annotations)) or [[]]

        for index, batch in enumerate(batches, start=1):
            log.info(
                "Publishing batch %d/%d (%d annotation(s)) to check run %s",
                index,
                len(batches),
                len(batch),
                check_run_id,
            )
            try:
                await self.client.update_check_run(
                    check_run_id,
                    name=check_name,
                    head_sha=head_sha,
                    title=OUTPUT_TITLE,
                    summary=summary,
                    annotations=batch,
                )
            except ApiError as e:
                raise PublishError(
                    f"Failed to publish batch {index}/{len(batches)}: {e}",
                    batch=index,
                ) from e

        return len(batches)
