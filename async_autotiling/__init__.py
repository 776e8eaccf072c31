"""async-autotiling

Automatic horizontal/vertical split switching for sway and i3.

This package provides a small daemon that:
- Maintains IPC connections to the window manager
- Listens for window focus events
- Picks the next split direction from the focused window's aspect ratio

License: MIT
Version: 0.1.0
"""

__version__ = "0.1.0"
