"""Incident → Document mapping.

Pure functions, no I/O. Metadata always carries ``incident_id``, ``status``,
``urgency`` and ``service``; ``priority`` and ``assignee`` only when the
incident has them.
"""

from __future__ import annotations

from collections.abc import Iterable

from apps.documents.dtos import Document
from apps.pagerduty.dtos import Incident

SOURCE = "pagerduty"
POSTMORTEM_DOCUMENT_TYPE = "postmortem"


def incident_to_document(incident: Incident) -> Document:
    """Map one incident to one normalized document."""
    content_parts = [incident.summary]
    if incident.description:
        content_parts.append(incident.description)

    metadata = {
        "incident_id": incident.id,
        "status": incident.status,
        "urgency": incident.urgency,
        "service": incident.service.name,
    }

    if incident.priority is not None:
        metadata["priority"] = incident.priority.name

    if incident.assignments:
        metadata["assignee"] = incident.assignments[0].assignee.name

    return Document(
        id=incident.id,
        content="\n\n".join(content_parts),
        title=incident.summary,
        source=SOURCE,
        url=incident.html_url,
        metadata=metadata,
        updated_at=incident.updated_at,
    )


def incidents_to_postmortems(incidents: Iterable[Incident]) -> list[Document]:
    """Map resolved incidents to documents tagged as postmortems."""
    documents = []
    for incident in incidents:
        if not incident.is_resolved:
            continue
        document = incident_to_document(incident)
        document.metadata["document_type"] = POSTMORTEM_DOCUMENT_TYPE
        documents.append(document)
    return documents
