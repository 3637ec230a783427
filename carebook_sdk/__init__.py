"""carebook SDK - transports and the capability client for the scheduling API."""
