# docchat/core/errors.py


class DocChatError(Exception):
    """Base class for errors raised by the chat pipeline."""


class ConfigurationError(DocChatError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            "Completion service is not configured. Missing: " + ", ".join(self.missing)
        )


class CompletionServiceError(DocChatError):
    """Transport, HTTP or payload failure from the completion endpoint."""


class UploadError(DocChatError):
    pass


class UnsupportedFileTypeError(UploadError):
    def __init__(self, extension: str = ""):
        self.extension = extension
        super().__init__("Unsupported file format. Please upload a PDF, Word, or Excel file.")


class EmptyDocumentError(UploadError):
    pass
