"""
WhatsApp submission components and the dashboard REST client.
"""
