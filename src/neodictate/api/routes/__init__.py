"""
API Routes - HTTP endpoint handlers

Routes receive HTTP requests, hand them to the dispatcher or the service
container, and return HTTP responses.
"""
