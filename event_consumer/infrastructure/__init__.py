"""
Infrastructure layer: configuration, logging, telemetry and message stream adapters.
"""
