"""
wait-mounts - mount-aware LXC container management for Proxmox VE.

Waits for network/external mounts to become active, restarts the containers
that depend on them, and keeps watching for mount loss.
"""

__version__ = "2.0.0"
