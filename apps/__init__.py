"""
Apps package - batch services.

This package contains the service applications:
- order_alerts: Delivery alerts and order updates for the orders API
"""
