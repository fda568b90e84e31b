"""Pydantic schemas for MenoWell check-ins, content, and API payloads."""
