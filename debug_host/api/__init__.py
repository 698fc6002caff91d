"""HTTP and WebSocket surface for the debug service."""
