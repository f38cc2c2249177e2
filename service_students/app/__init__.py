"""
Student Service package for the Student Portal.

CRUD over student profiles plus one guarded endpoint,
``GET /students/profile/{id}``, which verifies the caller's bearer token
through the shared verification client and only serves the profile whose
id equals the verified principal id.
"""
