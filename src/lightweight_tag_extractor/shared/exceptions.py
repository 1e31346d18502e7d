"""Exceptions raised by tag extraction operations."""

from typing import Optional

# Max length of the source excerpt quoted in error messages
EXCERPT_LENGTH = 60


class ExtractionError(Exception):
    """Base exception for extraction failures."""


class MalformedMarkupError(ExtractionError):
    """Raised when an accepted element never reaches nesting depth zero.

    The ``body`` attribute always holds the complete source text handed to the
    scan call, not the window the scanner was looking at when it gave up.
    """

    def __init__(
        self,
        body: str,
        tag_type: str,
        position: int,
        open_depth: Optional[int] = None
    ) -> None:
        self.body = body
        self.tag_type = tag_type
        self.position = position
        self.open_depth = open_depth

        excerpt = body[position:position + EXCERPT_LENGTH]
        message = (
            f"illegal html: <{tag_type}> at offset {position} is never closed"
        )
        if open_depth is not None:
            message += f" ({open_depth} level(s) still open)"
        super().__init__(f"{message}: {excerpt!r}")


class UnsupportedEntityError(ExtractionError):
    """Raised when entity decoding meets an entity it has no mapping for."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"unsupported entity transform: {entity}")
