"""
College leave approval workflow.

Multi-stage approval engine for student leave requests: stage
sequencing, approver resolution, state transitions, notifications
and leave statistics.
"""

__version__ = "1.0.0"
