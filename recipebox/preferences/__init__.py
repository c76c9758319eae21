"""
User preference profile.

Responsibilities:
- Own and persist the single user's preferences.
- Notify subscribers of every preference change.
- Reconcile profile-derived filters into the browsing session.
"""
