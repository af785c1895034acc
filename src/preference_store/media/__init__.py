# Consolidate all media in one place

from .medium import KeyValueMedium, ValueType
from .medium_memory import MediumMemory
from .medium_file import MediumFile
from .medium_sql import MediumSql
from .medium_s3 import MediumS3
from .medium_factory import create_medium, medium_factory
