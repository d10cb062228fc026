from enum import Enum


class SortKey(str, Enum):
    NAME = "name"
    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FileCategory(str, Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    PDF = "pdf"
    OTHER = "other"
