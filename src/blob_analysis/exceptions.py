"""Exceptions raised by the blob analysis pipeline."""


class BlobAnalysisError(Exception):
    """Base exception for all blob analysis errors."""


class InvalidImage(BlobAnalysisError, ValueError):
    """
    Input image or mask is missing, has zero width/height, or an unsupported shape.

    Attributes:
        shape: Shape of the offending array, if one was given
    """

    def __init__(self, message: str, shape=None):
        super().__init__(message)
        self.shape = shape


class InvalidArgument(BlobAnalysisError, ValueError):
    """
    A numeric parameter is outside its allowed domain.

    Attributes:
        name: Name of the offending parameter
        value: The rejected value
    """

    def __init__(self, message: str, name: str = None, value=None):
        super().__init__(message)
        self.name = name
        self.value = value
