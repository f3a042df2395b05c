"""
Rest compliance app.

Driver and employee rest timers, activity continuity checks and
dispatch availability decisions.
"""
