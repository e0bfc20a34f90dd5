"""Bearer-token verification for protected endpoints."""
