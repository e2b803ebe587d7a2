"""
Nerdiversary service package.

Milestone engine, calendar feeds and the offset-indexed Web Push scheduler.
"""
