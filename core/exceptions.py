"""Custom exceptions for Cognisheet"""


class CognisheetError(Exception):
    """Base exception for all Cognisheet errors"""
    pass


class MalformedAddress(CognisheetError):
    """Cell, range or column text that cannot be decoded"""
    def __init__(self, value, reason: str = None):
        message = f"Malformed address: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.value = value


class SheetNotFound(CognisheetError):
    """Unknown sheet id"""
    def __init__(self, sheet_id: str):
        super().__init__(f"Sheet not found: {sheet_id}")
        self.sheet_id = sheet_id


class NoSelection(CognisheetError):
    """A handler needed a range and none was selected"""
    def __init__(self, message: str = "Please select a data range first"):
        super().__init__(message)


class NoNumericData(CognisheetError):
    """Nothing numeric left to aggregate or plot"""
    def __init__(self, message: str = "No numeric data found in the selection"):
        super().__init__(message)


class UnsupportedIntentInput(CognisheetError):
    """Input routed to a handler that it cannot fulfil"""
    def __init__(self, message: str, intent: str = None):
        super().__init__(message)
        self.intent = intent


class LLMError(CognisheetError):
    """Error in LLM communication"""
    def __init__(self, message: str, provider: str = None, retries: int = 0):
        super().__init__(message)
        self.provider = provider
        self.retries = retries


class FileParseError(CognisheetError):
    """Error parsing an imported file"""
    def __init__(self, message: str, file_path: str = None):
        super().__init__(message)
        self.file_path = file_path


class PersistenceError(CognisheetError):
    """Error saving or loading sheets"""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
