"""
WhatsApp message template builder: model, validation, preview and wizard.
"""

__version__ = "0.1.0"
