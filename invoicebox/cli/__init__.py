"""Command line tools for InvoiceBox."""
