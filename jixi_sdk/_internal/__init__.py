"""Internal modules for the Jixi SDK.

These modules back ``JixiClient`` and are not a stable API.

Modules:
    config - Configuration snapshot
    http - Shared HTTP client configuration
    relay - Completion hand-off to the controlling thread
    transport - Thread-pool and event-loop transports
    workflows - Registry, request builder, tolerant decoding
    signing - URL signing
"""
