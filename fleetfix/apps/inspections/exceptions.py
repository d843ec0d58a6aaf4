from django.core.exceptions import ValidationError


class NoTemplateConfigured(ValidationError):
    def __init__(self):
        super().__init__(
            "No pre-start template configured for this equipment", code="no_template"
        )


class ChecklistItemError(ValidationError):
    """A single checklist answer is missing, malformed or lacks failure notes."""

    def __init__(self, message: str, item_id: int):
        super().__init__(message, code="checklist_item")
        self.item_id = item_id


class MediaLimitExceeded(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, code="media_limit")
