"""Service layer of the booking core."""
