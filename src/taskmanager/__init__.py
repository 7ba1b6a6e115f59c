"""Task Manager — personal task tracking behind JWT authentication.

Users register, log in for a bearer token, and manage the tasks they own.
"""

__version__ = "0.1.0"
