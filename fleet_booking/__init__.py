"""Fleet booking service: vehicle search, reservation and cancellation."""
