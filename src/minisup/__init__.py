"""minisup: a minimal process supervisor.

Runs one externally configured command as a long-lived background service,
either repeatedly (Simple mode) or persistently (Daemon mode), and logs what
happens to it.
"""

__version__ = "0.1.0"
