"""FastAPI application package for the task tracker."""
