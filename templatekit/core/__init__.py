"""
Configuration and logging.
"""
