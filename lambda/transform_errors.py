class TransformError(Exception):
    """Base class for failures that end an invocation with a 500 envelope."""


class InputError(TransformError):
    """The event did not describe a usable transform request."""


class ProcessingError(TransformError):
    """Reading, decoding, encoding or writing the image failed."""
