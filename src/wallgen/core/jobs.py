"""Canonical render-job states.

The render service owns the job state machine; the gateway keeps no job
table.  Each poll rebuilds one of the variants below from the upstream
status document, so the local view can never drift from the remote one.

::

    IN_QUEUE     -> Queued(queue_position?)
    IN_PROGRESS  -> Running()
    COMPLETED    -> Completed(image_url)   (after one result fetch)
    any error    -> Failed(error, status)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Queued:
    queue_position: int | None = None

    def to_dict(self) -> dict:
        data: dict = {"status": "Queued"}
        if self.queue_position is not None:
            data["queue_position"] = self.queue_position
        return data


@dataclass(frozen=True)
class Running:
    def to_dict(self) -> dict:
        return {"status": "Running"}


@dataclass(frozen=True)
class Completed:
    image_url: str | None = None

    def to_dict(self) -> dict:
        data: dict = {"status": "Completed"}
        if self.image_url is not None:
            data["image_url"] = self.image_url
        return data


@dataclass(frozen=True)
class Failed:
    """A poll that could not be answered.

    Attributes:
        error: Message describing the failure.
        status: HTTP status to report (already normalised to 400-599).
    """

    error: str
    status: int = 500

    def to_dict(self) -> dict:
        return {"error": self.error}


RenderJob = Queued | Running | Completed | Failed

# Upstream status strings reported by the fal.ai queue.
UPSTREAM_QUEUED = "IN_QUEUE"
UPSTREAM_RUNNING = "IN_PROGRESS"
UPSTREAM_COMPLETED = "COMPLETED"


def first_image(result: dict) -> dict | None:
    """Return the first entry of ``result["images"]``, if any."""
    images = result.get("images") if isinstance(result, dict) else None
    if not images or not isinstance(images[0], dict) or not images[0].get("url"):
        return None
    return images[0]


def queue_position(status: dict) -> int | None:
    position = status.get("queue_position")
    return position if isinstance(position, int) else None
