"""Core form utilities and mixins."""

from pathlib import Path
from typing import Any

from django import forms
from django.core.files.uploadedfile import UploadedFile
from PIL import Image, UnidentifiedImageError

from fleetfix.apps.core.media import (
    ALLOWED_HEIC_EXTENSIONS,
    IMAGE_MAX_BYTES,
    MEDIA_ACCEPT_ATTR,
    VIDEO_MAX_BYTES,
    is_video_file,
)

# Widget type to CSS class mapping
WIDGET_CSS_CLASSES = {
    forms.TextInput: "form-input",
    forms.EmailInput: "form-input",
    forms.NumberInput: "form-input",
    forms.DateInput: "form-input",
    forms.Textarea: "form-input form-textarea",
    forms.Select: "form-input",
    forms.CheckboxInput: "checkbox",
    # File inputs and RadioSelect are handled separately in templates
}


class StyledFormMixin:
    """
    Mixin that adds CSS classes to form widgets automatically.

    Usage:
        class MyForm(StyledFormMixin, forms.Form):
            name = forms.CharField()

    Existing widget attrs are preserved; a class is only added if missing.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._apply_widget_classes()

    def _apply_widget_classes(self):
        for field in self.fields.values():
            widget = field.widget
            for widget_type, css_class in WIDGET_CSS_CLASSES.items():
                if isinstance(widget, widget_type):
                    existing_classes = widget.attrs.get("class", "").split()
                    for cls in css_class.split():
                        if cls not in existing_classes:
                            existing_classes.append(cls)
                    widget.attrs["class"] = " ".join(existing_classes)
                    break


class MultiFileInput(forms.ClearableFileInput):
    """Clearable file input that allows selecting multiple files."""

    allow_multiple_selected = True


class MultiFileField(forms.FileField):
    """FileField that returns a list of uploaded files when multiple are provided."""

    widget = MultiFileInput

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("widget", MultiFileInput(attrs={"accept": MEDIA_ACCEPT_ATTR}))
        super().__init__(*args, **kwargs)

    def to_python(self, data):
        if not data:
            return []
        if isinstance(data, list | tuple):
            return [f for f in data if f]
        single = super().to_python(data)
        return [single] if single else []

    def validate(self, data):
        # Validate each file individually
        if not data:
            return
        errors = []
        for f in data:
            try:
                super().validate(f)
                self.run_validators(f)
            except forms.ValidationError as exc:
                errors.extend(exc.error_list)
        if errors:
            raise forms.ValidationError(errors)


def validate_media_files(files: list[UploadedFile]) -> list[UploadedFile]:
    """Validate uploaded photos and videos.

    Images are capped at 10MB and must open with Pillow; videos are capped at 80MB.
    Empty uploads (browsers send these for untouched inputs) are dropped.

    Raises:
        forms.ValidationError: If any file fails validation.
    """
    cleaned_files = []

    for media in files:
        if not media or not media.size:
            continue

        if is_video_file(media):
            if media.size > VIDEO_MAX_BYTES:
                raise forms.ValidationError(
                    f"{media.name} is too large. Videos must be 80MB or smaller."
                )
            cleaned_files.append(media)
            continue

        if media.size > IMAGE_MAX_BYTES:
            raise forms.ValidationError(
                f"{media.name} is too large. Images must be 10MB or smaller."
            )

        content_type = (getattr(media, "content_type", "") or "").lower()
        ext = Path(getattr(media, "name", "")).suffix.lower()

        # Reject non-image content types (except HEIC which browsers may not recognize)
        if (
            content_type
            and not content_type.startswith("image/")
            and ext not in ALLOWED_HEIC_EXTENSIONS
        ):
            raise forms.ValidationError("Upload a valid image or video.")

        # Pillow cannot decode HEIC without a plugin; trust the extension
        if ext not in ALLOWED_HEIC_EXTENSIONS:
            try:
                media.seek(0)
                Image.open(media).verify()
            except (UnidentifiedImageError, OSError) as err:
                raise forms.ValidationError("Upload a valid image or video.") from err
            finally:
                try:
                    media.seek(0)
                except (OSError, AttributeError):
                    pass

        cleaned_files.append(media)

    return cleaned_files


def collect_media_files(files_dict: Any, field_name: str, cleaned_data: dict) -> list[UploadedFile]:
    """Collect uploaded files from both multi-file and single-file contexts.

    Args:
        files_dict: The request.FILES or similar object.
        field_name: Name of the file field.
        cleaned_data: The form's cleaned_data dict.
    """
    files = []

    if hasattr(files_dict, "getlist"):
        files = list(files_dict.getlist(field_name))

    # Fallback for single-file contexts (e.g., tests passing a simple dict)
    if not files:
        single = cleaned_data.get(field_name)
        if single:
            files = list(single) if isinstance(single, list | tuple) else [single]

    return files
