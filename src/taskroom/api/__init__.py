"""HTTP and WebSocket API for Taskroom."""
