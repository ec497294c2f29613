"""Schemas de validación (pydantic)"""
