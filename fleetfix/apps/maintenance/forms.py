from django import forms
from django.contrib.auth import get_user_model

from fleetfix.apps.core.forms import StyledFormMixin
from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.transitions import valid_transitions


class TaskStatusForm(StyledFormMixin, forms.Form):
    """Offers only the statuses the task can move to next."""

    status = forms.ChoiceField(choices=())

    def __init__(self, *args, task: Task, **kwargs):
        super().__init__(*args, **kwargs)
        labels = dict(Task.Status.choices)
        self.fields["status"].choices = [
            (status, labels[status]) for status in valid_transitions(task.status)
        ]


class TaskCreateForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = Task
        fields = ["type", "description", "scheduled_date", "assigned_mechanic"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
            "scheduled_date": forms.DateTimeInput(attrs={"type": "datetime-local"}),
        }

    def __init__(self, *args, organization, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["description"].required = True
        self.fields["assigned_mechanic"].queryset = (
            get_user_model()
            .objects.filter(memberships__organization=organization)
            .order_by("username")
        )
