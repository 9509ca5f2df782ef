"""
Domain models module.

Immutable snapshots of routines, notification settings and scheduled
notifications exchanged between the core and its collaborators.
"""
