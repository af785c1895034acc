"""AWS S3 medium implementation for the key-value medium interface."""

import json

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .medium_document import DocumentMedium

info = {
    "class_name": "MediumS3",
    "description": "AWS S3 medium. All entries are stored as one JSON object.",
    "config_parameters": [
        {
            "name": "bucket_name",
            "required": True,
            "description": "The bucket holding the preferences object",
            "type": "string",
        },
        {
            "name": "object_key",
            "required": False,
            "default": "preferences.json",
            "description": "The key of the preferences object in the bucket",
            "type": "string",
        },
    ],
}

MISSING_OBJECT_CODES = ("NoSuchKey", "404")


class MediumS3(DocumentMedium):
    """AWS S3 medium for the preference store. The data is stored as JSON"""

    persist_errors = (BotoCoreError, ClientError, TypeError, ValueError)

    def __init__(self, config: dict):
        """Open the AWS S3 medium and read the current object, if any."""
        self.bucket_name = config["bucket_name"]
        self.object_key = config.get("object_key", "preferences.json")
        self.s3 = boto3.resource("s3")
        super().__init__(config)

    def load(self) -> dict:
        try:
            response = self.s3.Object(self.bucket_name, self.object_key).get()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                return {}
            raise
        return json.loads(response["Body"].read().decode("utf-8"))

    def persist(self, entries):
        self.s3.Object(self.bucket_name, self.object_key).put(
            Body=json.dumps(entries, ensure_ascii=False).encode("utf-8"),
            ContentType="application/json",
        )
