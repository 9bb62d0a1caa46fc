"""API error types and the handlers that render them as ``{"error", "code"}`` bodies."""
import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    status_code = 400
    code = "BAD_REQUEST"


class NotFoundError(ApiError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ApiError):
    status_code = 409
    code = "CONFLICT"


# field name -> (code when missing, code when malformed)
FIELD_ERROR_CODES: dict[str, tuple[str, str]] = {
    # bookings
    "flightId": ("MISSING_FLIGHT_ID", "INVALID_FLIGHT_ID"),
    "passengerId": ("MISSING_PASSENGER_ID", "INVALID_PASSENGER_ID"),
    "seatNumber": ("MISSING_SEAT_NUMBER", "INVALID_SEAT_NUMBER"),
    "totalPrice": ("MISSING_TOTAL_PRICE", "INVALID_TOTAL_PRICE"),
    "status": ("INVALID_STATUS", "INVALID_STATUS"),
    # passengers
    "firstName": ("INVALID_FIRST_NAME", "INVALID_FIRST_NAME"),
    "lastName": ("INVALID_LAST_NAME", "INVALID_LAST_NAME"),
    "email": ("MISSING_EMAIL", "INVALID_EMAIL_FORMAT"),
    "phone": ("MISSING_PHONE", "MISSING_PHONE"),
    "passportNumber": ("MISSING_PASSPORT_NUMBER", "INVALID_PASSPORT_FORMAT"),
    "dateOfBirth": ("MISSING_DATE_OF_BIRTH", "INVALID_DATE_FORMAT"),
    # query parameters
    "id": ("INVALID_ID", "INVALID_ID"),
    "limit": ("INVALID_PAGINATION", "INVALID_PAGINATION"),
    "offset": ("INVALID_PAGINATION", "INVALID_PAGINATION"),
    "date": ("INVALID_DATE", "INVALID_DATE"),
    "passengers": ("INVALID_PASSENGERS", "INVALID_PASSENGERS"),
}


def validation_error_code(errors: list[dict]) -> tuple[str, str]:
    """Pick the error to report: missing fields first, then the first malformed one."""
    if not errors:
        return "INVALID_REQUEST_BODY", "Invalid request body"
    ordered = sorted(errors, key=lambda e: e.get("type") != "missing")
    err = ordered[0]
    loc = tuple(err.get("loc") or ())
    if loc and loc[0] == "path":
        return "INVALID_ID", "Valid ID is required"
    field = loc[-1] if len(loc) > 1 else None
    codes = FIELD_ERROR_CODES.get(field) if isinstance(field, str) else None
    if codes is None or err.get("type") == "extra_forbidden":
        return "INVALID_REQUEST_BODY", f"Invalid request body: {err.get('msg', '')}"
    missing_code, invalid_code = codes
    if err.get("type") == "missing":
        return missing_code, f"{field} is required"
    msg = err.get("msg", "")
    # strip pydantic's "Value error, " prefix from field validators
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return invalid_code, f"{field}: {msg}"


def _error_body(message: str, code: str) -> dict:
    return {"error": message, "code": code}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        # unknown routes, wrong methods
        try:
            code = HTTPStatus(exc.status_code).name
        except ValueError:
            code = "HTTP_ERROR"
        return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail), code), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        code, message = validation_error_code(list(exc.errors()))
        return JSONResponse(status_code=400, content=_error_body(message, code))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_error_body(f"Internal server error: {exc}", "INTERNAL_ERROR"))
