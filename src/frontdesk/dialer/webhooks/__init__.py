"""
Dialer bridge webhooks.
"""
