"""
Todo Service package for the Student Portal.

Plain CRUD over todo items. Items carry no owner reference and none of the
endpoints require a token.
"""
