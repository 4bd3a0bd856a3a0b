"""
Pydantic schemas for templates, validation results and previews.
"""
