"""Custom exceptions for Blockfence services."""


class BlockfenceError(Exception):
    """Base class for Blockfence errors."""


class RegionNotFoundError(BlockfenceError, IndexError):
    """Raised when a fenced region is addressed by an index the block lacks.

    Attributes:
        index: Requested region index
        count: Number of regions the block actually has
    """

    def __init__(self, index: int, count: int):
        """Initialize RegionNotFoundError.

        Args:
            index: Requested region index
            count: Number of regions in the block
        """
        self.index = index
        self.count = count
        super().__init__(f"No fenced region at index {index} (block has {count})")


class ModeTransitionError(BlockfenceError):
    """Raised when a transition is requested from the wrong mode."""


class SessionTimeoutError(BlockfenceError, TimeoutError):
    """Raised when the UI does not reach an expected state in time."""
