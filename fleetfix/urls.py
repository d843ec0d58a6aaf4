from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import path
from django.views.generic import RedirectView

from fleetfix.apps.core.views import healthz
from fleetfix.apps.dashboard.views import DashboardView
from fleetfix.apps.fleet.views import EquipmentBulkQRView, EquipmentQRView
from fleetfix.apps.inspections import views as portal_views
from fleetfix.apps.maintenance.views import TaskCreateView, TaskDetailView

urlpatterns = [
    #
    # Home and health check
    #
    path("", RedirectView.as_view(pattern_name="dashboard"), name="home"),  # Staff landing page
    path("healthz", healthz, name="healthz"),  # Health check for the load balancer
    #
    # Django admin
    #
    path("admin/", admin.site.urls),
    #
    # Authentication
    #
    path(
        "login/",
        auth_views.LoginView.as_view(template_name="registration/login.html"),
        name="login",
    ),  # Login page
    path("logout/", auth_views.LogoutView.as_view(), name="logout"),  # Logout
    #
    # Staff
    #
    path("dashboard/", DashboardView.as_view(), name="dashboard"),  # Fleet dashboard
    path(
        "tasks/<int:pk>/", TaskDetailView.as_view(), name="task-detail"
    ),  # Task detail, status change on POST
    path(
        "equipment/<int:pk>/tasks/new/", TaskCreateView.as_view(), name="task-create"
    ),  # Raise a task against a unit
    path(
        "equipment/<int:pk>/qr/", EquipmentQRView.as_view(), name="equipment-qr"
    ),  # Printable QR code
    path(
        "equipment/qr/", EquipmentBulkQRView.as_view(), name="equipment-qr-bulk"
    ),  # Printable sheet of QR codes for the whole fleet
    #
    # Public QR portal (no login)
    #
    path(
        "qr/<int:pk>/", portal_views.PortalEquipmentView.as_view(), name="portal-equipment"
    ),  # Unit landing page, reading update on POST
    path(
        "qr/<int:pk>/pre-start/",
        portal_views.PrestartCheckView.as_view(),
        name="portal-prestart",
    ),  # Pre-start checklist
    path(
        "qr/<int:pk>/defect/", portal_views.DefectReportView.as_view(), name="portal-defect"
    ),  # Defect report
    path(
        "qr/<int:pk>/breakdown/",
        portal_views.BreakdownReportView.as_view(),
        name="portal-breakdown",
    ),  # Breakdown report
    path(
        "qr/<int:pk>/history/",
        portal_views.PrestartHistoryView.as_view(),
        name="portal-history",
    ),  # Recent pre-start checks
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
