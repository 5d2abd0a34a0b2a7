"""Infrastructure layer for CareBill: configuration, logging and observers."""
