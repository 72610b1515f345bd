"""Strata meeting check-in package.

Feature modules (owners, submissions, attendance, quorum, sync, ...) hold the
offline-first check-in core; ``server`` is a thin Flask receiver for the
attendance API and ``gateway`` is the client side of the same API.
"""
