"""
Notification planning module.

Turns validated settings and today's routine state into an ordered,
capped list of reminder instants with their content.
"""
