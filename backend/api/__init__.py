"""HTTP routers for the store API."""
