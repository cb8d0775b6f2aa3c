#!/usr/bin/env python3
"""Constants for session and supervisor timing.

The supervisor restarts sessions after a fixed cooldown with no backoff
growth and no retry limit.
"""

# Fixed delay between the end of one session and the start of the next, in seconds.
COOLDOWN: float = 5.0

# Upper bound on dialing (TCP, TLS and WebSocket handshake) in seconds.
DIAL_TIMEOUT: float = 15.0

# Longest interval between two idle checks of the watchdog, in seconds.
WATCHDOG_TICK: float = 1.0

# Time allowed for the closing handshake when a session ends, in seconds.
CLOSE_TIMEOUT: float = 2.0

# Time allowed for in-flight clipboard deliveries at shutdown, in seconds.
SHUTDOWN_DELIVERY_TIMEOUT: float = 2.0
