"""FastAPI routers for the MenoWell API."""
