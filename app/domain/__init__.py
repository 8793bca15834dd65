"""
Marketplace business rules as seen from the application side.

The authoritative rules run as database triggers; these modules mirror
them for display and for building valid row updates.
"""
