"""Prometheus metrics for LexVault.

Defines operational counters for the document lifecycle and access-control
core. Exposed at /metrics by observability.router.
"""

from prometheus_client import Counter

document_transitions_total = Counter(
    "lexvault_document_transitions_total",
    "Document lifecycle transitions applied",
    ["transition"]  # created|status_changed|archived|unarchived|deleted|restored|purged
)

assignment_transitions_total = Counter(
    "lexvault_assignment_transitions_total",
    "Assignment status transitions applied",
    ["to_status"]  # PENDING (created)|ACCEPTED|REJECTED|COMPLETED
)

permission_changes_total = Counter(
    "lexvault_permission_changes_total",
    "Explicit document permission grants written",
    ["level"]
)

authorization_denials_total = Counter(
    "lexvault_authorization_denials_total",
    "Operations rejected because the effective permission was too low",
    ["required_level"]
)

invalid_transitions_total = Counter(
    "lexvault_invalid_transitions_total",
    "Requested transitions rejected as unreachable",
    ["entity_type"]  # document|assignment
)

notification_failures_total = Counter(
    "lexvault_notification_failures_total",
    "Notifications that could not be created (non-fatal)",
    ["notification_type"]
)
