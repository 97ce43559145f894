"""
Service layer.

Each service encapsulates the business rules for one domain and is
constructed with the ``Database`` it reads from and writes to.
Services raise the errors from ``core.exceptions``; translating them
into HTTP responses is left to the endpoints.
"""
