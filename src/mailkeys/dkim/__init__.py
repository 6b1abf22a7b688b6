"""DKIM key provisioning components."""

from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec, KeyType
from mailkeys.dkim.workflow import DkimWorkflow, WorkflowResult

__all__ = [
    "DkimWorkflow",
    "KeyArtifactSet",
    "KeySpec",
    "KeyType",
    "WorkflowResult",
]
