"""
Run the GymBuddy backend locally with auto-reload.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting GymBuddy Backend")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:     GET  http://localhost:8000/health")
    print("   - Profile:          GET/POST http://localhost:8000/profile")
    print("   - Partner matches:  GET  http://localhost:8000/recommendations/partners")
    print("   - API Docs:              http://localhost:8000/docs")
    print()
    print("Authentication:")
    print("   All endpoints (except /health) require:")
    print("   Authorization: Bearer <supabase access token>")
    print()
    print("=" * 60)

    uvicorn.run(
        "gymbuddy.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
