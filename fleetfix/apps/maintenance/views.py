"""Staff views for maintenance tasks."""

from __future__ import annotations

from django.contrib import messages
from django.core.exceptions import PermissionDenied
from django.db import transaction
from django.shortcuts import get_object_or_404, redirect, render
from django.views import View
from django.views.generic import FormView

from fleetfix.apps.accounts.scope import OrganizationScopeMixin, ensure_same_organization
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.maintenance.forms import TaskCreateForm, TaskStatusForm
from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.services import change_task_status, create_task
from fleetfix.apps.maintenance.transitions import InvalidTransition


class TaskDetailView(OrganizationScopeMixin, View):
    """Task detail with the status change form. POST moves the task to a new status."""

    template_name = "maintenance/task_detail.html"

    def get_task(self) -> Task:
        task = get_object_or_404(
            Task.objects.select_related("equipment", "customer", "assigned_mechanic"),
            pk=self.kwargs["pk"],
        )
        ensure_same_organization(self.organization, task)
        return task

    def get(self, request, *args, **kwargs):
        task = self.get_task()
        return self.render_response(request, task, TaskStatusForm(task=task))

    def post(self, request, *args, **kwargs):
        task = self.get_task()
        if not self.membership.can_manage_tasks:
            raise PermissionDenied

        new_status = request.POST.get("status", "")
        try:
            change_task_status(task, new_status, user=request.user)
        except InvalidTransition as err:
            messages.error(request, err.message)
            return redirect("task-detail", pk=task.pk)

        messages.success(request, f"Task moved to {task.get_status_display()}.")
        return redirect("task-detail", pk=task.pk)

    def render_response(self, request, task, form):
        history = task.history.select_related("history_user").order_by("-history_date")[:20]
        return render(
            request,
            self.template_name,
            {
                "task": task,
                "form": form,
                "history": history,
                "organization": self.organization,
                "can_manage": self.membership.can_manage_tasks,
            },
        )


class TaskCreateView(OrganizationScopeMixin, FormView):
    """Staff-raised task (planned maintenance or a defect spotted in the yard)."""

    template_name = "maintenance/task_form.html"
    form_class = TaskCreateForm

    def get_equipment(self) -> Equipment:
        equipment = get_object_or_404(Equipment, pk=self.kwargs["pk"])
        ensure_same_organization(self.organization, equipment)
        return equipment

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["organization"] = self.organization
        return kwargs

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["equipment"] = self.get_equipment()
        return context

    def form_valid(self, form):
        if not self.membership.can_manage_tasks:
            raise PermissionDenied
        equipment = self.get_equipment()
        with transaction.atomic():
            task = create_task(
                equipment,
                type=form.cleaned_data["type"],
                description=form.cleaned_data["description"],
                reporter_name=self.request.user.get_full_name() or self.request.user.get_username(),
                reading_at_report=equipment.current_reading,
            )
            task.scheduled_date = form.cleaned_data.get("scheduled_date")
            task.assigned_mechanic = form.cleaned_data.get("assigned_mechanic")
            task.save(update_fields=["scheduled_date", "assigned_mechanic", "updated_at"])
        messages.success(self.request, f"Task #{task.pk} created.")
        return redirect("task-detail", pk=task.pk)
