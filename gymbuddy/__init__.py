"""GymBuddy backend: profiles, friends, workouts and AI workout-partner matching."""
