from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = "Success"
    data: Optional[T] = None


class SuccessResponse:
    @staticmethod
    def send(data=None, message="Success"):
        return {"success": True, "message": message, "data": data}


class ErrorResponse:
    @staticmethod
    def send(message="An error occurred", errors=None, **extra):
        return {"success": False, "message": message, "errors": errors if errors else [], **extra}
