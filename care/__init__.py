"""Care application for the Jeevrakshak backend.

Accounts, nearest-hospital dispatch, the per-hospital request queue,
prescriptions, admissions and staffing.
"""
