"""
Service layer.

Services hold the business rules and talk to the database; API
handlers only translate between HTTP and service calls.
"""
