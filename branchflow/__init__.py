"""
Branchflow - Chapter event approval, calendar admission and proctor ledger.

Three subsystems share one role directory:
- Event lifecycle engine (approval ledger + status state machine)
- Admission controller (two approved events per day, ten-day lead time)
- Proctor assignment ledger (five mentees per mentor, one mentor per mentee)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
