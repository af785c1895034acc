"""Memory medium class"""

from .medium_document import DocumentMedium

info = {
    "class_name": "MediumMemory",
    "description": "Process-local medium. Entries are lost when the process exits.",
    "config_parameters": [],
}


class MediumMemory(DocumentMedium):
    """Memory medium for the preference store."""

    def load(self) -> dict:
        return {}

    def persist(self, entries):
        pass
