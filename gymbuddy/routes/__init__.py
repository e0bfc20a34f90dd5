"""
FastAPI routers for all API endpoints.

Each module defines a router for one domain (profile, friends, workouts,
notifications, recommendations) and follows the same flow:
auth dependency -> request validation -> service call -> response model.
"""
