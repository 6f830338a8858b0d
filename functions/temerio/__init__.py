"""
Temerio account service.

A FastAPI application with store, auth and billing abstractions backing the
Temerio timeline product's account features: checkout and subscription
status, device pairing codes, person merge with best-effort undo, first-run
seeding and the activity feed. ``temerio.client`` holds the matching client
helpers.
"""
