# src/ventthirds/errors.py
# Every failure here ends the run with one user-facing message; none is retried.


class ThirdsError(Exception):
    """Base class for conditions that abort a thresholding run cleanly."""


class InvalidInput(ThirdsError, ValueError):
    """Malformed input (empty point set, bad configuration, missing image)."""


class MultiImageNotSupported(ThirdsError):
    def __init__(self, message: str = (
            "To run this script, only ONE image can be opened at a time. "
            "Please open (double-click) a single image of interest. Script will now exit.")):
        super().__init__(message)


class EmptySelection(ThirdsError):
    def __init__(self, message: str = (
            "To run this script, you MUST select (click) a non-empty structure. "
            "Script will now exit.")):
        super().__init__(message)


class InsufficientData(ThirdsError):
    def __init__(self, message: str = (
            "Selected Structure contains too few distinct intensity values to "
            "determine appropriate thresholds. Script will exit.")):
        super().__init__(message)
