"""
Customers App - Paint Customer & Sale Tracking

Customers are keyed by CPF and carry their purchase history as an embedded
list of sales (most recent first) plus a derived ``last_purchase`` timestamp.

Architecture:
- Models: Customer (sales embedded as JSON documents)
- Services: reconciliation (pure list logic), customer/sale management,
  search, CPF validation client
- Views: RESTful API for the customer list, customer page and sale dialogs
"""
