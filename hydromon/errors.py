from typing import Optional

class FirebaseError(Exception):
    """A Firebase REST call failed or answered with something unusable"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

class MalformedBatchError(FirebaseError):
    """The top-level response could not be read as a collection of records"""
