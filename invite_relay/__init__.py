"""Shopify order webhook relay.

Receives order-created webhooks, verifies their HMAC signature, extracts the
customer's contact fields and forwards them to the invitation API.
"""
