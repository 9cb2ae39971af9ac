"""API module - FastAPI application exposing collaborators and sessions."""
