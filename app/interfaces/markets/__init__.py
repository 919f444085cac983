"""Markets bounded context: HTTP interface."""
