"""
Exceptions raised by the inquiry pipeline
NOTE: Classification failures never appear here. They are recovered inside the orchestrator by falling back to the general category
"""


class ConfigurationError(RuntimeError):
    """The remote model credentials or model identifier are missing"""


class EmptyMessageError(ValueError):
    """The customer message is empty or only whitespace"""

    def __init__(self, message: str = "Message cannot be empty"):
        super().__init__(message)


class InquiryProcessingError(RuntimeError):
    """The response call to the remote model failed. The original cause is chained, never shown to the customer"""

    def __init__(self, message: str = "An error occurred processing your request"):
        super().__init__(message)
