"""
API Middleware - Request/response processing

- error_handler: exception handlers rendering ErrorResponse JSON
- auth: scheduler trigger check for the generation endpoint
"""
