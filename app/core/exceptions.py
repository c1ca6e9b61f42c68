from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Required fields missing", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found", status_code: int = HTTP_404_NOT_FOUND):
        super().__init__(status_code=status_code, detail=detail)


class AlreadyRegistered(HTTPException):
    def __init__(self, detail: str = "Already registered", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self, detail: str = "Invalid credentials", status_code: int = HTTP_401_UNAUTHORIZED):
        super().__init__(status_code=status_code, detail=detail)


class AdminRequired(HTTPException):
    def __init__(self, detail: str = "Admin access required", status_code: int = HTTP_403_FORBIDDEN):
        super().__init__(status_code=status_code, detail=detail)


class OtpNotFound(HTTPException):
    def __init__(self, detail: str = "OTP not found or already used", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class OtpExpired(HTTPException):
    def __init__(self, detail: str = "OTP has expired", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class OtpInvalid(HTTPException):
    def __init__(self, detail: str = "Invalid OTP", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class OtpExhausted(HTTPException):
    def __init__(self, detail: str = "Too many invalid OTP attempts", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class SlotUnavailable(HTTPException):
    def __init__(self, detail: str = "Time slot not available", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class InvalidTransition(HTTPException):
    def __init__(self, detail: str = "Cannot cancel this appointment", status_code: int = HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class BookingIdUnavailable(HTTPException):
    def __init__(self, detail: str = "Could not generate a unique booking id", status_code: int = HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)
