from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """Error returned to the API caller as {"error": {"code", "message"}}"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": {"code": self.error.code, "message": self.error.message}}
