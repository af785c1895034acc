"""File medium implementation for the key-value medium interface."""

import json
import os

from .medium_document import DocumentMedium

info = {
    "class_name": "MediumFile",
    "description": "JSON file medium. The whole file is rewritten on every change.",
    "config_parameters": [
        {
            "name": "file",
            "required": True,
            "description": "The file to use for storage",
            "type": "string",
        },
    ],
}


class MediumFile(DocumentMedium):
    """File medium for the preference store."""

    persist_errors = (OSError, TypeError, ValueError)

    def __init__(self, config: dict):
        """Open the file medium, creating an empty file if needed."""
        self.storage_file = config["file"]
        super().__init__(config)

    def load(self) -> dict:
        if not os.path.exists(self.storage_file):
            self.persist({})
            return {}
        with open(self.storage_file, "r", encoding="utf-8") as file:
            return json.load(file)

    def persist(self, entries):
        # Write to a sibling file first so a failed write leaves the old file intact
        tmp_file = f"{self.storage_file}.tmp"
        with open(tmp_file, "w", encoding="utf-8") as file:
            json.dump(entries, file, ensure_ascii=False)
        os.replace(tmp_file, self.storage_file)
