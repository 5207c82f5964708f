"""Top-level package for the RideLink trip core.

This package turns a rider's free-form trip description (text or voice)
into a structured, geocoded trip request, matches requests against
stored trips, and relays payments to the store's atomic procedure.
"""
