"""InvoiceBox - invoicing backend with smart client spreadsheet import."""

__version__ = "0.1.0"
