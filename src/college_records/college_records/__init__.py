"""College Records package.

Organized by feature modules (ledger, attendance, assignments, ...) with a
thin Flask controller layer over service and repository layers.
"""
