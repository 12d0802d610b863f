from django.urls import path
from .views import ProjectListCreateView, ProjectDetailView, ProjectRecountView

urlpatterns = [
    path('', ProjectListCreateView.as_view(), name='project_list_create'),
    path('<uuid:project_id>/', ProjectDetailView.as_view(), name='project_detail'),
    path('<uuid:project_id>/recount/', ProjectRecountView.as_view(), name='project_recount'),
]
