"""Order service: CRUD over orders and their line items."""
