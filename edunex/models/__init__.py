"""Pydantic models and enumerations shared across EduNex."""
