"""
auth — Account authentication module.

Provides:
  • JWT token creation & verification (HS256)
  • Password hashing (bcrypt)
  • Client / freelancer registration and login API routes
  • ``get_current_claims`` / ``require_role`` FastAPI dependencies
"""
