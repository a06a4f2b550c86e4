"""Error and warning kinds raised by the analysis components."""


class DataLoadError(ValueError):
    """Dataset file is missing, unreadable, or lacks required columns."""


class MissingValueWarning(UserWarning):
    """A numeric field could not be parsed and was replaced by null."""


class InsufficientSampleError(ValueError):
    """A hypothesis test sample has fewer than two observations.

    Attributes:
        label: Name of the undersized sample
        size: Number of observations it actually holds
    """

    def __init__(self, label: str, size: int, minimum: int = 2):
        self.label = label
        self.size = size
        self.minimum = minimum
        super().__init__(
            f"Sample '{label}' has {size} observation(s); "
            f"at least {minimum} required"
        )
