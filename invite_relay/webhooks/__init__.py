"""Webhook inbound system.

Receives Shopify order-created webhooks. Each webhook is signature-verified,
parsed into an order, reduced to a customer record and forwarded.
"""
