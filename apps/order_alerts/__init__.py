"""
Order Alerts Service.

Runs one batch pass over the medical equipment orders API:
1. Fetch orders from the orders API
2. Send a delivery alert for every item already marked Delivered
3. Increment the item's delivery notification counter
4. Post the updated order to the update API

Architecture:
    Runner → OrderAlertOrchestrator → RestClient (HTTP) → Orders API
                                    ↓
                                    AlertNotifier → RestClient (HTTP) → Alert API
"""

__version__ = "0.1.0"
