"""
Monitor Module

Components:
- MountDependencyMonitor: Wait / restart / surveil state machine loop
- monitor_session: Scoped logging and signal handling around a run
"""

from .monitor_loop import MountDependencyMonitor
from .session import MonitorSession, monitor_session

__all__ = ["MountDependencyMonitor", "MonitorSession", "monitor_session"]
