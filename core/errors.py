"""Error kinds raised by the engine and its collaborators."""


class QuizError(Exception):
    """Base class for every engine error."""


class GenerationError(QuizError):
    """Question or passage generation failed or returned an unusable result."""


class GradingError(QuizError):
    """Answer evaluation failed or returned an incomplete result."""


class ValidationError(QuizError):
    """
    An operation was attempted while its precondition does not hold.

    Raised before any state mutation or external call.
    """
