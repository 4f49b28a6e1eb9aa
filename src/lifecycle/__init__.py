"""
Lifecycle subsystem
-------------------

Exports the public API for:
- periodic polling (PollScheduler)

The application run loop depends on the hardware layer, which itself uses
the scheduler, so it is imported from its module:
    from lifecycle import PollScheduler
    from lifecycle.beagle_application import BeagleApplication, launch
"""

from .poll_scheduler import PollScheduler, ScheduledJob

__all__ = [
    "PollScheduler",
    "ScheduledJob",
]
