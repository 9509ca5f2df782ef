"""
Streak consistency module.

Decides which calendar days a routine is due on and keeps each routine's
streak consistent with confirmations, skips and days that passed unseen.
"""
