from fastapi import APIRouter
from skybook.api.v1.routes.flights import router as flights_router
from skybook.api.v1.routes.passengers import router as passengers_router
from skybook.api.v1.routes.bookings import router as bookings_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(flights_router)
api_router.include_router(passengers_router)
api_router.include_router(bookings_router)
