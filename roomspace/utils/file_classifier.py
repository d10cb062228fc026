from roomspace.consts import FileCategory


class FileClassifier:
    """Utility class for classifying file types"""

    SPREADSHEET_TYPES = [
        "text/csv",
        "application/csv",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ]

    @staticmethod
    def is_image(mime_type: str) -> bool:
        return mime_type.startswith("image/")

    @staticmethod
    def is_pdf(mime_type: str) -> bool:
        return mime_type == "application/pdf"

    @staticmethod
    def is_spreadsheet(mime_type: str) -> bool:
        return (
            mime_type in FileClassifier.SPREADSHEET_TYPES or
            "spreadsheet" in mime_type or
            "excel" in mime_type
        )

    @staticmethod
    def is_presentation(mime_type: str) -> bool:
        return "presentation" in mime_type or "powerpoint" in mime_type

    @staticmethod
    def is_document(mime_type: str) -> bool:
        return "document" in mime_type or "text" in mime_type or "word" in mime_type

    @staticmethod
    def get_file_category(mime_type: str) -> FileCategory:
        """Determine the category of a file from its MIME type"""
        mime_type = (mime_type or "").lower()
        if FileClassifier.is_image(mime_type):
            return FileCategory.IMAGE
        elif FileClassifier.is_pdf(mime_type):
            return FileCategory.PDF
        elif FileClassifier.is_spreadsheet(mime_type):
            return FileCategory.SPREADSHEET
        elif FileClassifier.is_presentation(mime_type):
            return FileCategory.PRESENTATION
        elif FileClassifier.is_document(mime_type):
            return FileCategory.DOCUMENT
        return FileCategory.OTHER
