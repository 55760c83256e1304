"""
Normalized documents app.

Holds the storage-ready ``Document`` record produced by source connectors,
the opaque ``DataRef`` handle returned when a batch is persisted, and the
pluggable document store that connectors hand their batches to.
"""

default_app_config = "apps.documents.apps.DocumentsConfig"
