"""Authentication and authorization.

Learn: Three pieces, wired together in main.create_app():
1. PasswordHasher → bcrypt hashes for stored credentials
2. TokenService → signed, short-lived JWTs binding a user id
3. get_current_user_id → FastAPI dependency that turns a Bearer header
   into the user id every protected route is scoped by

AuthService composes them for the register/login flows.
"""
