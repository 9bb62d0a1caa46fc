from skybook.models.flight import Flight  # noqa: F401
from skybook.models.passenger import Passenger  # noqa: F401
from skybook.models.booking import Booking  # noqa: F401
